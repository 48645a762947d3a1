from typing import Any, MutableMapping, Optional, Protocol

from haven.config import get_config
from haven.logging import get_logger

from .credentials import CredentialsProvider, SessionUser


class SessionProvider(Protocol):
    """Supplies the acting user for a request, or None when signed out."""

    def current_user(self) -> Optional[SessionUser]:
        ...


class SessionStateProvider(SessionProvider):
    """Session kept in a mutable mapping such as Streamlit's `st.session_state`."""
    def __init__(
        self,
        state: MutableMapping[str, Any],
        credentials: Optional[CredentialsProvider] = None,
        key: Optional[str] = None,
    ) -> None:
        self.state = state
        self.credentials = credentials
        self.key = key or get_config().session_key
        self.logger = get_logger(__name__)

    def sign_in(self, email: str, password: str) -> Optional[SessionUser]:
        """Authorize and store the user in the session.

        Raises:
            RuntimeError: If no credentials provider was configured.
        """
        if self.credentials is None:
            raise RuntimeError("SessionStateProvider has no credentials provider")
        user = self.credentials.authorize(email, password)
        if user is None:
            return None
        self.state[self.key] = user.model_dump()
        return user

    def sign_out(self) -> None:
        if self.state.pop(self.key, None) is not None:
            self.logger.info("Signed out")

    def current_user(self) -> Optional[SessionUser]:
        data = self.state.get(self.key)
        if data is None:
            return None
        return SessionUser.model_validate(data)
