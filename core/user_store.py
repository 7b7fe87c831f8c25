"""File-based JSON user store."""

from __future__ import annotations

import logging
import secrets
import threading
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from core.models import UserRecord
from tools.file_utils import read_json_file, write_json_file

logger = logging.getLogger(__name__)

DEFAULT_REMEMBER_TOKEN_DAYS = 14


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(moment: Optional[datetime] = None) -> str:
    """Get a timestamp in ISO format."""
    return (moment or _now()).isoformat()


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Unparseable timestamp in user store: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def token_expired(user: UserRecord, now: Optional[datetime] = None) -> bool:
    """A token without a readable expiry counts as expired."""
    expires_at = _parse_timestamp(user.get("remember_token_expires_at"))
    if expires_at is None:
        return True
    return (now or _now()) >= expires_at


class UserStore:
    """Users keyed by login, persisted as one JSON document.

    Reads and mutations hold ``self._lock`` so concurrent requests see a
    consistent user map and do not interleave their writes.
    """

    def __init__(
        self,
        users_file: Path,
        remember_token_days: int = DEFAULT_REMEMBER_TOKEN_DAYS,
        admin_password: str = "admin",
    ):
        self.users_file = Path(users_file)
        self.remember_token_ttl = timedelta(days=remember_token_days)
        self.users: Dict[str, UserRecord] = {}
        self._lock = threading.Lock()
        self._load_users(admin_password)

    def _load_users(self, admin_password: str):
        """Load users from JSON file, seeding an admin account if none exists."""
        if self.users_file.exists():
            try:
                self.users = read_json_file(self.users_file)
            except ValueError:
                logger.error(f"Corrupt users file {self.users_file}")
                raise
            logger.info(f"Loaded {len(self.users)} users from {self.users_file}")
        else:
            logger.warning(f"No users file at {self.users_file}, seeding default 'admin' account")
            self.users = {}
            self._insert("admin", admin_password, "admin@example.com")
            self._save_users()

    def _save_users(self):
        write_json_file(self.users_file, self.users)

    def _insert(self, login: str, password: str, email: str) -> UserRecord:
        user: UserRecord = {
            "id": uuid.uuid4().hex,
            "login": login,
            "email": email,
            "password_hash": generate_password_hash(password),
            "remember_token": None,
            "remember_token_expires_at": None,
            "last_logout_at": None,
            "created_at": _timestamp(),
        }
        self.users[login] = user
        return user

    def _require(self, login: str) -> UserRecord:
        user = self.users.get(login)
        if user is None:
            raise KeyError(f"Unknown user '{login}'")
        return user

    def add_user(self, login: str, password: str, email: str = "") -> UserRecord:
        """Create a user. Raises ``ValueError`` on empty or duplicate login."""
        login = (login or "").strip()
        if not login:
            raise ValueError("login must not be empty")
        with self._lock:
            if login in self.users:
                raise ValueError(f"User '{login}' already exists")
            user = self._insert(login, password, email)
            self._save_users()
        logger.info(f"Created user {login}")
        return dict(user)

    def get_user(self, login: str) -> Optional[UserRecord]:
        """Get user info."""
        with self._lock:
            user = self.users.get(login)
            return dict(user) if user else None

    def authenticate(self, login: str, password: str) -> Optional[UserRecord]:
        """Return the user when login and password match, else ``None``."""
        if not login or password is None:
            return None
        with self._lock:
            user = self.users.get(login)
            user = dict(user) if user else None
        if not user:
            return None
        if not check_password_hash(user["password_hash"], password):
            return None
        return user

    def remember_me(self, login: str) -> Tuple[str, datetime]:
        """Issue a fresh remember token and return it with its expiry."""
        expires_at = _now() + self.remember_token_ttl
        token = secrets.token_hex(20)
        with self._lock:
            user = self._require(login)
            user["remember_token"] = token
            user["remember_token_expires_at"] = _timestamp(expires_at)
            self._save_users()
        logger.info(f"Issued remember token for {login}, expires {expires_at.isoformat()}")
        return token, expires_at

    def forget_me(self, login: str) -> None:
        with self._lock:
            user = self._require(login)
            user["remember_token"] = None
            user["remember_token_expires_at"] = None
            self._save_users()

    def on_logout(self, login: str) -> None:
        """Record the logout time for auditing."""
        with self._lock:
            user = self._require(login)
            user["last_logout_at"] = _timestamp()
            self._save_users()
        logger.info(f"User {login} logged out")

    def find_by_remember_token(self, token: str) -> Optional[UserRecord]:
        """Find the user holding ``token``, ignoring expired tokens."""
        if not token:
            return None
        # compare_digest rejects non-ASCII str, so compare encoded bytes
        candidate = token.encode("utf-8", "surrogateescape")
        with self._lock:
            for user in self.users.values():
                stored = user.get("remember_token")
                if stored and secrets.compare_digest(stored.encode("utf-8"), candidate):
                    if token_expired(user):
                        return None
                    return dict(user)
        return None
