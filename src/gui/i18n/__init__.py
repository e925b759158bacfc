"""Simple internationalization (i18n) infrastructure.

 - Minimal translation registry with locale switch & fallback.
 - String interpolation via ``str.format`` with named placeholders.
 - Key extraction helper scanning source files for ``t("...")`` calls so
   tests can verify every key used in code exists in the default catalog.

Design decisions / assumptions:
 - A *default locale* (``"en"``) always exists and is consulted as fallback.
 - Missing key after fallback returns the key itself (easy to spot during
   audits) rather than raising.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

__all__ = [
    "DEFAULT_LOCALE",
    "register_catalog",
    "set_locale",
    "get_locale",
    "has_key",
    "t",
    "translate",
    "extract_translation_keys",
]

DEFAULT_LOCALE = "en"
_current_locale = DEFAULT_LOCALE

_catalogs: Dict[str, Dict[str, str]] = {}


def register_catalog(locale: str, catalog: Dict[str, str]) -> None:
    """Register or extend a catalog for a locale (last registration wins)."""
    _catalogs.setdefault(locale, {}).update(catalog)


def set_locale(locale: str) -> None:
    global _current_locale
    _current_locale = locale


def get_locale() -> str:
    return _current_locale


def _lookup(locale: str, key: str) -> Optional[str]:
    catalog = _catalogs.get(locale)
    if not catalog:
        return None
    return catalog.get(key)


def has_key(key: str, locale: str = DEFAULT_LOCALE) -> bool:
    return _lookup(locale, key) is not None


def translate(key: str, **variables: Any) -> str:
    """Translate a key using the current locale with fallback.

    Variables are interpolated using ``str.format``. Missing variables raise
    ``KeyError`` to surface programmer error.
    """
    text = _lookup(_current_locale, key)
    if text is None and _current_locale != DEFAULT_LOCALE:
        text = _lookup(DEFAULT_LOCALE, key)
    if text is None:
        return key
    if "{" in text and "}" in text:
        try:
            return text.format(**variables)
        except KeyError as e:
            raise KeyError(f"Missing interpolation variable {e.args[0]!r} for key '{key}'") from e
    return text


# Short alias commonly used in UI code.
t = translate


_RE_T_CALL = re.compile(r"\b(?:t|translate)\(\s*['\"]([^'\"]+)['\"]")


def extract_translation_keys(paths: Iterable[str | Path]) -> Set[str]:
    """Scan directories / files for ``t("key")`` / ``translate("key")`` usages."""
    collected: Set[str] = set()
    for p in paths:
        path = Path(p)
        files = path.rglob("*.py") if path.is_dir() else [path]
        for file in files:
            if file.suffix != ".py":
                continue
            text = file.read_text(encoding="utf-8")
            collected.update(m.group(1) for m in _RE_T_CALL.finditer(text))
    return collected


from .strings import EN_STRINGS  # noqa: E402  (catalog registers against the API above)

register_catalog(DEFAULT_LOCALE, EN_STRINGS)
