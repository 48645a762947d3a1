import pytest

from haven.auth.credentials import SessionUser
from haven.auth.session import SessionStateProvider

USER = SessionUser(id="u-1", email="ana.gomez@example.com", firstname="Ana", user_type="seller")


class StubCredentials:
    def authorize(self, email, password):
        if (email, password) == (USER.email, "password123"):
            return USER
        return None


def test_sign_in_stores_user():
    state = {}
    session = SessionStateProvider(state, StubCredentials())
    assert session.sign_in(USER.email, "password123") == USER
    assert state["haven_user"] == USER.model_dump()
    assert session.current_user() == USER


def test_failed_sign_in_leaves_state_untouched():
    state = {}
    session = SessionStateProvider(state, StubCredentials())
    assert session.sign_in(USER.email, "wrong-password") is None
    assert state == {}
    assert session.current_user() is None


def test_sign_out_clears_user():
    state = {"haven_user": USER.model_dump()}
    session = SessionStateProvider(state)
    session.sign_out()
    assert session.current_user() is None
    session.sign_out()


def test_custom_key():
    state = {}
    session = SessionStateProvider(state, StubCredentials(), key="who")
    session.sign_in(USER.email, "password123")
    assert "who" in state


def test_sign_in_without_credentials_provider():
    with pytest.raises(RuntimeError):
        SessionStateProvider({}).sign_in(USER.email, "password123")
