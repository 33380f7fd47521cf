"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        AlchemyTableError: Base exception for all application errors.
        CraftingError and its five kinds: business-rule craft rejections.
        StorageError, CraftCommitError, InventoryContractError: persistence failures.
        ConfigurationError: Configuration-related errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the cached settings.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from alchemy_table.core.config import (
    ProgressionSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from alchemy_table.core.exceptions import (
    AlchemyTableError,
    ConfigurationError,
    CraftCommitError,
    CraftErrorKind,
    CraftingError,
    InsufficientIngredientsError,
    InventoryContractError,
    LevelTooLowError,
    PlayerStateNotFoundError,
    RecipeNotFoundError,
    RecipeUnavailableError,
    StorageError,
)
from alchemy_table.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


__all__ = [
    # Base exception
    "AlchemyTableError",
    # Crafting exceptions
    "CraftErrorKind",
    "CraftingError",
    "PlayerStateNotFoundError",
    "RecipeNotFoundError",
    "RecipeUnavailableError",
    "LevelTooLowError",
    "InsufficientIngredientsError",
    # Storage exceptions
    "StorageError",
    "CraftCommitError",
    "InventoryContractError",
    # Configuration
    "ConfigurationError",
    "Settings",
    "StorageSettings",
    "ProgressionSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
]
