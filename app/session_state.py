"""SessionState backed by the Flask session."""

from typing import List, Optional

from flask import flash, g, session

from core.messages import FlashMessage
from core.session_state import FlashEntry, SessionState

PRINCIPAL_KEY = "user_login"
RETURN_TO_KEY = "return_to"
FLASHES_KEY = "_flashes"


class FlaskSessionState(SessionState):
    """Session state for the current request.

    Persisted flashes go through ``flask.flash``; render-only flashes live on
    ``flask.g`` and disappear with the request.
    """

    def current_principal(self) -> Optional[str]:
        return session.get(PRINCIPAL_KEY)

    def bind_principal(self, login: Optional[str]) -> None:
        if login is None:
            session.pop(PRINCIPAL_KEY, None)
        else:
            session[PRINCIPAL_KEY] = login

    def flash(self, kind: FlashMessage, text: str, category: str = "notice") -> None:
        flash(text, category)

    def flash_now(self, kind: FlashMessage, text: str, category: str = "notice") -> None:
        if "flash_now" not in g:
            g.flash_now = []
        g.flash_now.append((category, text))

    def pending_now(self) -> List[FlashEntry]:
        return list(g.get("flash_now", []))

    def store_return_to(self, path: str) -> None:
        session[RETURN_TO_KEY] = path

    def pop_return_to(self) -> Optional[str]:
        return session.pop(RETURN_TO_KEY, None)

    def reset(self) -> None:
        flashes = session.get(FLASHES_KEY)
        session.clear()
        if flashes:
            session[FLASHES_KEY] = flashes
