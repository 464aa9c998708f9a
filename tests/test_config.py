"""Configuration tests: defaults, environment overrides, pattern validation."""

import pytest
from pydantic import ValidationError

from toolschema.config import Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.tool_name_pattern == r"^[a-zA-Z0-9_-]{1,64}$"


def test_environment_override(monkeypatch):
    monkeypatch.setenv("PERMISSION_PATTERN", r"^[a-z]+$")
    assert Settings().permission_pattern == r"^[a-z]+$"


def test_invalid_pattern_rejected(monkeypatch):
    monkeypatch.setenv("TOOL_NAME_PATTERN", "[unclosed")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
