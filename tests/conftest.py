"""Root conftest: shared test configuration."""

import pytest

from toolschema.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Settings come from defaults, never from the developer's environment."""
    for var in (
        "TOOL_NAME_PATTERN", "PERMISSION_PATTERN", "LOG_LEVEL", "LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
