from __future__ import annotations

"""
Internationalization (i18n) Utility.

Singleton catalog of user-facing strings for the shell and the CLI. Keys use
dot notation into nested JSON locale files; lookups fall back to the English
catalog and finally to the key itself, so a missing translation never breaks
a command.
"""

import json
import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# SYSTEM DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_LOCALE = "en"
LOCALES_REL_PATH = os.path.join("..", "interface", "locales")


class I18n:
    """
    Locale-aware string catalog with `{placeholder}` interpolation.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        self._locales_path = os.path.abspath(os.path.join(base_dir, LOCALES_REL_PATH))
        self._fallback: Dict[str, Any] = self._read(DEFAULT_LOCALE)
        self._translations: Dict[str, Any] = self._fallback
        self._locale = DEFAULT_LOCALE
        if locale != DEFAULT_LOCALE:
            self.load_locale(locale)

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def is_loaded(self) -> bool:
        return bool(self._translations)

    def load_locale(self, locale: str) -> None:
        """
        Switch the active catalog. Unknown locales keep English active.
        """
        data = self._read(locale)
        if not data:
            logger.warning(f"I18n: locale '{locale}' unavailable, keeping '{self._locale}'.")
            return
        self._translations = data
        self._locale = locale
        logger.debug(f"I18n: active locale is now '{locale}'")

    def t(self, key: str, **kwargs: Any) -> str:
        """
        Resolve `key` (e.g. 'shell.errors.unknown') and format it with kwargs.

        Returns:
            str: The formatted string, or `key` when it cannot be resolved.
        """
        template = self._lookup(self._translations, key)
        if template is None and self._translations is not self._fallback:
            template = self._lookup(self._fallback, key)
        if template is None:
            return key
        try:
            return template.format(**kwargs) if kwargs else template
        except (KeyError, IndexError, ValueError) as e:
            logger.debug(f"I18n: formatting failed for '{key}': {e}")
            return template

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _read(self, locale: str) -> Dict[str, Any]:
        file_path = os.path.join(self._locales_path, f"{locale}.json")
        if not os.path.exists(file_path):
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"I18n: corrupted locale file {file_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _lookup(catalog: Dict[str, Any], key: str) -> Any:
        current: Any = catalog
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
        return current if isinstance(current, str) else None


# Global singleton instance for application-wide resource access
i18n = I18n(DEFAULT_LOCALE)
