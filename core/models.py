from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, TypedDict

OutcomeAction = Literal["render", "redirect"]


class UserRecord(TypedDict, total=False):
    id: str
    login: str
    email: str
    password_hash: str
    remember_token: Optional[str]
    remember_token_expires_at: Optional[str]  # ISO-8601, UTC
    last_logout_at: Optional[str]
    created_at: str


class Credentials(TypedDict):
    login: str
    password: str
    remember_me: bool


class RememberCookie(TypedDict):
    name: str
    value: str
    expires: datetime


class LoginOutcome(TypedDict, total=False):
    action: OutcomeAction
    location: str
    cookie: RememberCookie


class LogoutOutcome(TypedDict):
    location: str
    delete_cookie: str
