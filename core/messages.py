"""Localized flash messages."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


class FlashMessage(Enum):
    """Kinds of flash messages the session gateway emits."""

    LOGGED_IN = "session.flash_notice.logged_in"
    AUTHENTICATION_FAILED = "session.flash_notice.authentication_failed"
    LOGGED_OUT = "session.flash_notice.logged_out"

    @property
    def key(self) -> str:
        return self.value


BUILTIN_MESSAGES: Dict[str, Dict[str, str]] = {
    DEFAULT_LOCALE: {
        FlashMessage.LOGGED_IN.key: "Logged in successfully.",
        FlashMessage.AUTHENTICATION_FAILED.key: "Authentication failed.",
        FlashMessage.LOGGED_OUT.key: "You have been logged out.",
    }
}


class MessageCatalog:
    """Resolve ``FlashMessage`` kinds to text for a locale.

    Lookup order is the requested locale, then the catalog's default locale,
    then the built-in English text.
    """

    def __init__(self, bundles: Optional[Dict[str, Dict[str, str]]] = None, default_locale: str = DEFAULT_LOCALE):
        self.default_locale = default_locale
        self.bundles: Dict[str, Dict[str, str]] = {
            locale: dict(texts) for locale, texts in BUILTIN_MESSAGES.items()
        }
        for locale, texts in (bundles or {}).items():
            self.bundles.setdefault(locale, {}).update(texts)

    @classmethod
    def from_file(cls, path: Path, default_locale: str = DEFAULT_LOCALE) -> "MessageCatalog":
        """Load bundles from a YAML file of the form ``{locale: {key: text}}``."""
        bundles: Dict[str, Dict[str, str]] = {}
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"Message bundle {path} must map locales to messages")
            for locale, texts in raw.items():
                if not isinstance(texts, dict):
                    raise ValueError(f"Messages for locale '{locale}' in {path} must be a mapping")
                bundles[str(locale)] = {str(k): str(v) for k, v in texts.items()}
            logger.info(f"Loaded message bundles for {sorted(bundles)} from {path}")
        else:
            logger.info(f"No message bundle at {path}, using built-in messages")
        return cls(bundles, default_locale=default_locale)

    def locales(self) -> List[str]:
        return sorted(self.bundles)

    def best_locale(self, candidates: Iterable[str]) -> str:
        """Pick the first candidate the catalog knows, matching on language prefix."""
        for candidate in candidates:
            if not candidate:
                continue
            if candidate in self.bundles:
                return candidate
            language = candidate.replace("_", "-").split("-")[0].lower()
            if language in self.bundles:
                return language
        return self.default_locale

    def message(self, kind: FlashMessage, locale: Optional[str] = None) -> str:
        for candidate in (locale, self.default_locale, DEFAULT_LOCALE):
            if candidate and kind.key in self.bundles.get(candidate, {}):
                return self.bundles[candidate][kind.key]
        return kind.key
