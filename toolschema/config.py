"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - Name and permission patterns are full-match regular expressions

Design Decisions:
    - pydantic-settings over raw os.environ: validated values and .env file support (ADR: developer UX)
    - Tool name pattern mirrors the Anthropic Messages API limit (1-64 chars, [a-zA-Z0-9_-])
"""

import re
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Registry and logging settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Registry
    tool_name_pattern: str = r"^[a-zA-Z0-9_-]{1,64}$"
    permission_pattern: str = r"^[a-z][a-z0-9_-]*(:[a-z0-9_*-]+)*$"

    @field_validator("tool_name_pattern", "permission_pattern")
    @classmethod
    def must_compile(cls, v: str) -> str:
        """Fail at startup, not at first registration, on a broken pattern."""
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {v!r}: {exc}") from exc
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
