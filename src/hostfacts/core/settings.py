"""Settings for hostfacts sessions.

``HostFactsSettings`` collects everything a collection session needs to know
before it starts: where to find plugins, which plugins to skip, whether the
runner tolerates per-plugin failures, and how to log.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not mid-run
    - **Environment-driven:** Reads ``HOSTFACTS_*`` env vars and ``.env`` files
    - **Sensible defaults:** Builtin plugins, safe mode, quiet logging

Examples:
    >>> from hostfacts.core.settings import HostFactsSettings
    >>> settings = HostFactsSettings(disabled_plugins=["Hostname"])
    >>> settings.safe_run
    True

Tags:
    settings, configuration, pydantic, environment, hostfacts

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class HostFactsSettings(BaseSettings):
    """Validated session configuration.

    Fields
    ──────
    plugin_path             : Extra plugin directories, searched recursively
    include_builtin_plugins : Load the plugins shipped in ``hostfacts.plugins``
    disabled_plugins        : Plugin names marked as run without collecting
    safe_run                : Contain per-plugin failures instead of aborting
    log_level               : Structlog log level
    log_format              : ``console`` or ``json``
    """

    model_config = SettingsConfigDict(
        env_prefix="HOSTFACTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Plugins ──────────────────────────────────────────────────
    plugin_path: list[Path] = Field(default_factory=list)
    include_builtin_plugins: bool = Field(default=True)
    disabled_plugins: list[str] = Field(default_factory=list)

    # ── Execution ────────────────────────────────────────────────
    safe_run: bool = Field(default=True, description="Run plugins in safe mode")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_format: Literal["console", "json"] = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level


_settings_cache: dict[str, HostFactsSettings] = {}


def get_settings(*, _force_reload: bool = False) -> HostFactsSettings:
    """Load, validate, and cache the process-wide settings."""
    if _force_reload or "default" not in _settings_cache:
        _settings_cache["default"] = HostFactsSettings()
    return _settings_cache["default"]


def clear_settings_cache() -> None:
    """Drop the cached settings (for testing)."""
    _settings_cache.clear()


__all__ = ["HostFactsSettings", "LOG_LEVELS", "get_settings", "clear_settings_cache"]
