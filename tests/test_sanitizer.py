"""Tests for identifier sanitization."""

import pytest

from rescodegen.errors import InvalidIdentifierError
from rescodegen.sanitizer import Sanitizer


def test_normalize() -> None:
    """Verify character replacement and keyword escaping."""
    s = Sanitizer()
    assert s.normalize("settings") == "settings"
    assert s.normalize("my-module") == "my_module"
    assert s.normalize("class") == "class_"
    assert s.normalize(" padded ") == "padded"


@pytest.mark.parametrize("token", ["123", "9lives", "---", ""])
def test_normalize_rejects_invalid_tokens(token: str) -> None:
    """Verify that tokens which cannot become identifiers are rejected."""
    with pytest.raises(InvalidIdentifierError):
        Sanitizer().normalize(token)


def test_constant_and_function_names() -> None:
    """Verify constant casing and profile qualification."""
    s = Sanitizer()
    assert s.constant("app_name") == "APP_NAME"
    assert s.constant("appName") == "APP_NAME"
    assert s.constant("api-url", "debug") == "API_URL_DEBUG"
    assert s.function("greeting") == "greeting"
    assert s.function("greeting", "Debug") == "greeting_debug"
    assert s.alias(["ui", "settingsPanel", "title"]) == "UI_SETTINGS_PANEL_TITLE"


def test_reserved_identifiers() -> None:
    """Verify that reserved identifiers are never produced."""
    s = Sanitizer(["APP_NAME", "helpers"])
    with pytest.raises(InvalidIdentifierError, match="reserved"):
        s.constant("app_name")
    with pytest.raises(InvalidIdentifierError, match="reserved"):
        s.module("helpers")
    assert s.constant("app_title") == "APP_TITLE"
