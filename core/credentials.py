"""Parsing of the login form at the HTTP boundary.

The ``remember_me`` field arrives as a raw string. Only the literal ``"1"``
opts in to a remember-token cookie:

    ====================  =======
    raw value             result
    ====================  =======
    ``"1"``               True
    absent (``None``)     False
    ``""``                False
    ``"0"``               False
    ``"true"``, ``"on"``  False
    anything else         False
    ====================  =======
"""

from typing import Mapping, Optional

from core.models import Credentials

REMEMBER_ME_ON = "1"


def parse_remember_me(raw: Optional[str]) -> bool:
    """Only the exact literal ``"1"`` means true."""
    return raw == REMEMBER_ME_ON


def parse_login_form(form: Mapping[str, str]) -> Credentials:
    """Build typed credentials from submitted form fields."""
    return {
        "login": (form.get("login") or "").strip(),
        "password": form.get("password") or "",
        "remember_me": parse_remember_me(form.get("remember_me")),
    }
