"""Configuration management for the Alchemy Table crafting engine.

Centralized configuration using pydantic-settings, supporting environment
variables, .env files and runtime overrides.

Example:
    >>> from alchemy_table.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.progression.curve
    'exponential'

Environment Variables:
    ALCHEMY_TABLE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ALCHEMY_TABLE_JSON_LOGS: Emit JSON log lines
    ALCHEMY_TABLE_STORAGE_DATABASE_PATH: Path to the SQLite database
    ALCHEMY_TABLE_STORAGE_BUSY_TIMEOUT_SECONDS: Wait for the write lock this long
    ALCHEMY_TABLE_PROGRESSION_CURVE: Leveling curve ('exponential' or 'table')
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from alchemy_table.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the SQLite store.

    Attributes:
        database_path: Path to the SQLite database file.
        busy_timeout_seconds: How long a transaction waits for the write lock.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALCHEMY_TABLE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/alchemy_table.db"),
        description="Path to SQLite database",
    )
    busy_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=300,
        description="Seconds to wait for the database write lock",
    )


class ProgressionSettings(BaseSettings):
    """Configuration for the player leveling curve.

    Attributes:
        curve: Which leveling curve to build.
        base_xp: Base XP of the exponential curve.
        exponent: Exponent of the exponential curve.
        max_level: Highest reachable level.
        thresholds: XP needed to leave level ``i + 1`` (table curve only).
    """

    model_config = SettingsConfigDict(
        env_prefix="ALCHEMY_TABLE_PROGRESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    curve: Literal["exponential", "table"] = Field(
        default="exponential",
        description="Leveling curve",
    )
    base_xp: int = Field(default=100, ge=1, description="Exponential curve base XP")
    exponent: float = Field(default=1.5, gt=0, le=5, description="Exponential curve exponent")
    max_level: int = Field(default=1000, ge=1, description="Highest reachable level")
    thresholds: list[int] = Field(
        default_factory=list,
        description="Per-level XP thresholds for the table curve",
    )

    @field_validator("thresholds", mode="after")
    @classmethod
    def validate_thresholds(cls, value: list[int]) -> list[int]:
        """Reject non-positive thresholds.

        Raises:
            ConfigurationError: If any threshold is below 1.
        """
        if any(threshold < 1 for threshold in value):
            raise ConfigurationError(
                "Leveling thresholds must all be positive",
                config_key="thresholds",
            )
        return value

    @model_validator(mode="after")
    def validate_table_curve(self) -> "ProgressionSettings":
        """Ensure the table curve has something to read from.

        Raises:
            ConfigurationError: If the table curve is selected without thresholds.
        """
        if self.curve == "table" and not self.thresholds:
            raise ConfigurationError(
                "Table leveling curve selected but no thresholds configured",
                config_key="thresholds",
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines instead of console output.
        storage: Storage settings.
        progression: Leveling curve settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALCHEMY_TABLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Alchemy Table", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    storage: StorageSettings = Field(default_factory=StorageSettings)
    progression: ProgressionSettings = Field(default_factory=ProgressionSettings)

    @property
    def is_production(self) -> bool:
        """True if not in debug mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached application settings.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "ProgressionSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
