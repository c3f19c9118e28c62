"""Process-level settings for sqlnaming.

Settings that belong to the *invocation* rather than to a project (log
level, output format, which config file to use) come from environment
variables prefixed ``SQLNAMING_`` and an optional ``.env`` file.  Project
rules live in the YAML file handled by :mod:`sqlnaming.config`.

Examples:
    >>> import os
    >>> os.environ["SQLNAMING_DIALECT"] = "postgresql"
    >>> get_settings(_force_reload=True).dialect
    'postgresql'

Tags:
    settings, configuration, pydantic, environment, sqlnaming
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_OUTPUT_FORMATS = ("text", "json", "github", "rich")


class SqlNamingSettings(BaseSettings):
    """Settings read from ``SQLNAMING_*`` environment variables.

    Fields
    ──────
    log_level     : structlog log level
    log_json      : force JSON (True) or console (False) logs; None = auto
    dialect       : default SQL dialect when no config file names one
    config_file   : explicit path to a ``.sqlnaming.yaml``
    output_format : report format for ``sqlnaming lint``
    color         : allow colored terminal output
    """

    model_config = SettingsConfigDict(
        env_prefix="SQLNAMING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    log_json: bool | None = None

    # ── Linting ──────────────────────────────────────────────────
    dialect: str = "ansi"
    config_file: Path | None = Field(
        default=None,
        description="Explicit lint configuration file; discovered upward when unset",
    )

    # ── Output ───────────────────────────────────────────────────
    output_format: str = "text"
    color: bool = True

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level: {value}")
        return value

    @field_validator("output_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in _OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {', '.join(_OUTPUT_FORMATS)}")
        return value


_settings: SqlNamingSettings | None = None


def get_settings(*, _force_reload: bool = False) -> SqlNamingSettings:
    """Return the cached settings, building them on first use."""
    global _settings
    if _settings is None or _force_reload:
        _settings = SqlNamingSettings()
    return _settings


__all__ = ["SqlNamingSettings", "get_settings"]
