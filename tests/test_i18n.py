from pathlib import Path

import pytest

from gui import i18n
from gui.i18n import extract_translation_keys, has_key, register_catalog, set_locale, t

GUI = Path(__file__).resolve().parents[1] / "src" / "gui"
UI_SOURCES = [GUI / "views", GUI / "viewmodels", GUI / "main_window.py"]


@pytest.fixture(autouse=True)
def _restore_locale():
    yield
    set_locale(i18n.DEFAULT_LOCALE)


def test_all_used_keys_exist_in_default_catalog():
    used = extract_translation_keys(UI_SOURCES)
    assert "search.placeholder" in used
    missing = sorted(k for k in used if not has_key(k))
    assert missing == []


def test_interpolation():
    assert t("error.not_found", resource="clan") == "Resource not found (clan)."
    with pytest.raises(KeyError):
        t("error.not_found")


def test_missing_key_returns_key():
    assert t("nope.missing") == "nope.missing"


def test_locale_fallback():
    register_catalog("xx", {"field.unset": "Sin definir"})
    set_locale("xx")
    assert t("field.unset") == "Sin definir"
    assert t("field.name") == "Name"


def test_error_message_keys_exist():
    from gui.viewmodels.clan_lookup_viewmodel import _MESSAGES

    keys = {key for key, _ in _MESSAGES.values()} | {"error.server"}
    keys |= {var for _, variables in _MESSAGES.values() for var in variables.values()}
    assert all(has_key(k) for k in keys)
