"""Login and logout operations over a user store and a session."""

from __future__ import annotations

import logging
from typing import Mapping, Optional
from urllib.parse import urlsplit

from core.credentials import parse_login_form
from core.messages import FlashMessage, MessageCatalog
from core.models import LoginOutcome, LogoutOutcome
from core.session_state import SessionState
from core.user_store import UserStore

logger = logging.getLogger(__name__)

WRITE_METHODS = frozenset({"POST"})
DEFAULT_COOKIE_NAME = "auth_token"


def is_safe_return_path(path: Optional[str]) -> bool:
    """Only local absolute paths may be redirected back to."""
    if not path or not path.startswith("/") or path.startswith("//") or "\\" in path:
        return False
    parts = urlsplit(path)
    return not parts.scheme and not parts.netloc


class SessionGateway:
    """Binds authenticated users to sessions and manages the remember cookie.

    The gateway never touches the web framework. Each operation receives the
    session explicitly and returns an outcome describing the response to
    emit: render the login form, or redirect, plus any cookie change.
    """

    def __init__(
        self,
        store: UserStore,
        messages: MessageCatalog,
        home_path: str = "/",
        cookie_name: str = DEFAULT_COOKIE_NAME,
    ):
        self.store = store
        self.messages = messages
        self.home_path = home_path
        self.cookie_name = cookie_name

    def current_user(self, session: SessionState):
        login = session.current_principal()
        if not login:
            return None
        return self.store.get_user(login)

    def login(
        self,
        method: str,
        form: Mapping[str, str],
        session: SessionState,
        locale: Optional[str] = None,
    ) -> LoginOutcome:
        if method.upper() not in WRITE_METHODS:
            return {"action": "render"}

        credentials = parse_login_form(form)
        user = self.store.authenticate(credentials["login"], credentials["password"])
        if not user:
            session.bind_principal(None)
            session.flash_now(
                FlashMessage.AUTHENTICATION_FAILED,
                self.messages.message(FlashMessage.AUTHENTICATION_FAILED, locale),
                category="loginerror",
            )
            logger.warning(f"Failed login attempt for '{credentials['login']}'")
            return {"action": "render"}

        session.bind_principal(user["login"])
        outcome: LoginOutcome = {"action": "redirect"}
        if credentials["remember_me"]:
            token, expires_at = self.store.remember_me(user["login"])
            outcome["cookie"] = {"name": self.cookie_name, "value": token, "expires": expires_at}

        session.flash(FlashMessage.LOGGED_IN, self.messages.message(FlashMessage.LOGGED_IN, locale))
        return_to = session.pop_return_to()
        outcome["location"] = return_to if is_safe_return_path(return_to) else self.home_path
        logger.info(f"User {user['login']} logged in, redirecting to {outcome['location']}")
        return outcome

    def logout(self, session: SessionState, locale: Optional[str] = None) -> LogoutOutcome:
        user = self.current_user(session)
        if user:
            self.store.on_logout(user["login"])
            self.store.forget_me(user["login"])

        session.flash(FlashMessage.LOGGED_OUT, self.messages.message(FlashMessage.LOGGED_OUT, locale))
        outcome: LogoutOutcome = {"location": self.home_path, "delete_cookie": self.cookie_name}
        # Location is fixed above; the reset must stay the last step.
        session.reset()
        return outcome

    def restore_from_cookie(self, token: Optional[str], session: SessionState) -> bool:
        """Bind the holder of a valid remember token to an anonymous session."""
        if not token or session.current_principal():
            return False
        user = self.store.find_by_remember_token(token)
        if not user:
            return False
        session.bind_principal(user["login"])
        logger.info(f"Restored session for {user['login']} from remember cookie")
        return True
