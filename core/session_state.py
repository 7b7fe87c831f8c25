"""Session store contract used by the session gateway."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from core.messages import FlashMessage

FlashEntry = Tuple[str, str]  # (category, text)


class SessionState(ABC):
    """Per-request view of a session: principal, flashes, return path."""

    @abstractmethod
    def current_principal(self) -> Optional[str]:
        ...

    @abstractmethod
    def bind_principal(self, login: Optional[str]) -> None:
        """Bind ``login`` as the session principal, or unbind with ``None``."""

    @abstractmethod
    def flash(self, kind: FlashMessage, text: str, category: str = "notice") -> None:
        """Queue a message that survives the next redirect."""

    @abstractmethod
    def flash_now(self, kind: FlashMessage, text: str, category: str = "notice") -> None:
        """Queue a message for the current render only."""

    @abstractmethod
    def pending_now(self) -> List[FlashEntry]:
        ...

    @abstractmethod
    def store_return_to(self, path: str) -> None:
        ...

    @abstractmethod
    def pop_return_to(self) -> Optional[str]:
        ...

    @abstractmethod
    def reset(self) -> None:
        """Drop all session data, keeping only flashes queued for the next request."""


class InMemorySessionState(SessionState):
    """Dictionary-backed session, for use outside a web request."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = data if data is not None else {}
        self.now: List[FlashEntry] = []
        self.resets = 0

    def current_principal(self) -> Optional[str]:
        return self.data.get("user_login")

    def bind_principal(self, login: Optional[str]) -> None:
        if login is None:
            self.data.pop("user_login", None)
        else:
            self.data["user_login"] = login

    def flash(self, kind: FlashMessage, text: str, category: str = "notice") -> None:
        self.data.setdefault("_flashes", []).append((category, text))

    def flash_now(self, kind: FlashMessage, text: str, category: str = "notice") -> None:
        self.now.append((category, text))

    def pending_now(self) -> List[FlashEntry]:
        return list(self.now)

    def flashes(self) -> List[FlashEntry]:
        return list(self.data.get("_flashes", []))

    def store_return_to(self, path: str) -> None:
        self.data["return_to"] = path

    def pop_return_to(self) -> Optional[str]:
        return self.data.pop("return_to", None)

    def reset(self) -> None:
        flashes = self.data.get("_flashes")
        self.data.clear()
        if flashes:
            self.data["_flashes"] = flashes
        self.resets += 1
