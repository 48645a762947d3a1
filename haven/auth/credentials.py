from typing import Optional

import bcrypt
from pydantic import BaseModel, EmailStr, Field, ValidationError

from haven.config import get_config
from haven.data.interface import CatalogReader
from haven.data.models import UserType
from haven.data.util import get_data_access
from haven.logging import get_logger


class SessionUser(BaseModel):
    """Identity carried by a signed-in session."""
    id: str
    email: str
    firstname: str
    user_type: UserType


class _Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt.

    Args:
        password (str): Plain-text password.
        rounds (int, optional): bcrypt cost factor. Defaults to the configured value.
    Returns:
        str: The encoded bcrypt hash.
    """
    if rounds is None:
        rounds = get_config().password_hash_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class CredentialsProvider:
    """Email/password sign-in against stored bcrypt hashes."""
    def __init__(self, reader: CatalogReader) -> None:
        self.reader = reader
        self.logger = get_logger(__name__)

    def authorize(self, email: str, password: str) -> Optional[SessionUser]:
        """Check credentials and build the session identity.

        Returns:
            SessionUser | None: The signed-in user, or None when the input is
            malformed, the account is unknown, or the password does not match.
        """
        try:
            credentials = _Credentials(email=email, password=password)
        except ValidationError:
            self.logger.debug("Rejected malformed credentials")
            return None

        user = self.reader.get_user_by_email(credentials.email)
        if user is None or not verify_password(credentials.password, user.password):
            self.logger.info(f"Failed sign-in for {credentials.email}")
            return None

        self.logger.info(f"Signed in {user.user_id}")
        return SessionUser(id=user.user_id, email=user.email, firstname=user.firstname, user_type=user.user_type)


def get_credentials_provider(reader: Optional[CatalogReader] = None) -> CredentialsProvider:
    """Returns a new CredentialsProvider over the configured data access."""
    if reader is None:
        reader = get_data_access()
    return CredentialsProvider(reader)
