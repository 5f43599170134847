"""Configuration system for benchlog.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (BENCHLOG_*) -> .env file -> field defaults.

Overrides coming from the command line are applied via resolve_config() which
creates a new config instance without mutating the defaults. Range checks are
left to the handlers that consume each value, so a bad value is reported by
the handler that owns it.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from benchlog.exceptions import ConfigError


class LoggerConfig(BaseSettings):
    """Configuration for the built-in log handlers.

    Resolution order: init kwargs -> env vars (BENCHLOG_*) -> .env file -> defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="BENCHLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Text handler ---

    verbosity: int = Field(
        default=3,
        description="Verbosity level {5 - debug, 0 - only critical messages}",
    )

    # --- Operation handler ---

    percentile: str = Field(
        default="95",
        description="Comma-separated percentiles for latency statistics (empty disables)",
    )
    histogram: bool = Field(
        default=False,
        description="Print latency histogram in report",
    )

    @field_validator("percentile", mode="before")
    @classmethod
    def _join_percentiles(cls, value: Any) -> Any:
        """Accept a list of numbers or a single number for ``percentile``."""
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def percentile_values(self) -> list[str]:
        """Return the percentile option as a list of raw numeric strings.

        An empty or blank option yields an empty list.
        """
        return [item.strip() for item in self.percentile.split(",") if item.strip()]


# All known config field names.
_ALL_FIELDS: frozenset[str] = frozenset(LoggerConfig.model_fields.keys())


def _normalize_key(key: str) -> str:
    """Map a command-line style option name to a field name.

    Args:
        key: Option name, with or without leading dashes.

    Returns:
        The field name (``'--percentile'`` -> ``'percentile'``).
    """
    return key.lstrip("-").replace("-", "_")


def resolve_config(
    defaults: LoggerConfig,
    overrides: dict[str, Any] | None,
) -> LoggerConfig:
    """Create a new config instance merging defaults with overrides.

    Args:
        defaults: The base configuration loaded from the environment.
        overrides: Option values keyed by option name (``'verbosity'``,
            ``'--percentile'``...). ``percentile`` also takes a number or a
            list of numbers.

    Returns:
        A new LoggerConfig with overrides applied, or *defaults* itself when
        there is nothing to override.

    Raises:
        ConfigError: If a key is unknown or a value fails type validation.
    """
    if not overrides:
        return defaults

    updates: dict[str, Any] = {}
    for key, value in overrides.items():
        field_name = _normalize_key(key)
        if field_name not in _ALL_FIELDS:
            raise ConfigError(f"Unknown log option: '{key}'")
        updates[field_name] = value

    # model_copy(update=...) skips validation, so "on" would not become True.
    merged = defaults.model_dump()
    merged.update(updates)
    try:
        return LoggerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid log option value: {exc}") from exc
