"""Custom exception hierarchy for the Alchemy Table crafting engine.

All exceptions inherit from AlchemyTableError, enabling unified error
handling at the application boundary while preserving domain-specific
context in ``details``.

Business-rule failures of a craft attempt derive from CraftingError and
carry a ``kind`` so callers can branch on it instead of matching messages.
Storage failures derive from StorageError and are never confused with the
business-rule errors.

Example:
    >>> from alchemy_table.core.exceptions import LevelTooLowError
    >>> raise LevelTooLowError(required_level=3, current_level=2)
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class AlchemyTableError(Exception):
    """Base exception for all Alchemy Table errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Crafting Domain Exceptions
# =============================================================================


class CraftErrorKind(StrEnum):
    """Caller-visible kinds of craft rejection."""

    PLAYER_STATE_NOT_FOUND = "player_state_not_found"
    RECIPE_NOT_FOUND = "recipe_not_found"
    RECIPE_UNAVAILABLE = "recipe_unavailable"
    LEVEL_TOO_LOW = "level_too_low"
    INSUFFICIENT_INGREDIENTS = "insufficient_ingredients"


class CraftingError(AlchemyTableError):
    """Base exception for crafting business-rule failures.

    Raised before any persisted state changes. Subclasses fix ``kind``.
    """

    kind: CraftErrorKind


class PlayerStateNotFoundError(CraftingError):
    """Raised when no player state exists for a user."""

    kind = CraftErrorKind.PLAYER_STATE_NOT_FOUND

    def __init__(self, user_id: str, *, details: dict[str, Any] | None = None) -> None:
        combined_details = details or {}
        combined_details["user_id"] = user_id
        self.user_id = user_id
        super().__init__("Player state not found", details=combined_details)


class RecipeNotFoundError(CraftingError):
    """Raised when a recipe id does not match any recipe."""

    kind = CraftErrorKind.RECIPE_NOT_FOUND

    def __init__(self, recipe_id: str, *, details: dict[str, Any] | None = None) -> None:
        combined_details = details or {}
        combined_details["recipe_id"] = recipe_id
        self.recipe_id = recipe_id
        super().__init__("Recipe not found", details=combined_details)


class RecipeUnavailableError(CraftingError):
    """Raised when a recipe exists but is not active."""

    kind = CraftErrorKind.RECIPE_UNAVAILABLE

    def __init__(self, recipe_id: str, *, details: dict[str, Any] | None = None) -> None:
        combined_details = details or {}
        combined_details["recipe_id"] = recipe_id
        self.recipe_id = recipe_id
        super().__init__("Recipe is not available", details=combined_details)


class LevelTooLowError(CraftingError):
    """Raised when the player's level is below the recipe's required level.

    The message always reads ``Level {required_level} required``.
    """

    kind = CraftErrorKind.LEVEL_TOO_LOW

    def __init__(
        self,
        *,
        required_level: int,
        current_level: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize level error with level context.

        Args:
            required_level: Level the recipe requires.
            current_level: The player's current level.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        combined_details["required_level"] = required_level
        if current_level is not None:
            combined_details["current_level"] = current_level
        self.required_level = required_level
        self.current_level = current_level
        super().__init__(f"Level {required_level} required", details=combined_details)


class InsufficientIngredientsError(CraftingError):
    """Raised when the player holds too little of one or more ingredients."""

    kind = CraftErrorKind.INSUFFICIENT_INGREDIENTS

    def __init__(
        self,
        message: str = "Missing required ingredients",
        *,
        missing: list[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ingredient error with shortfall context.

        Args:
            message: Human-readable error description.
            missing: Shortfalls as ``{"item_id", "required", "held"}`` dicts.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if missing:
            combined_details["missing"] = missing
        self.missing = missing or []
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(AlchemyTableError):
    """Base exception for persistence failures.

    Never used for business-rule rejections.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error with operation context.

        Args:
            message: Human-readable error description.
            operation: Name of the storage operation that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        super().__init__(message, details=combined_details)


class CraftCommitError(StorageError):
    """Raised when the commit phase of a craft fails for a non-business reason.

    The whole transaction has been rolled back when this is raised.
    """


class InventoryContractError(StorageError):
    """Raised when a guarded inventory decrement finds too little stock.

    Consumption is always preceded by a sufficiency check inside the same
    transaction, so this signals a broken caller contract.
    """


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(AlchemyTableError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


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
    # Configuration exceptions
    "ConfigurationError",
]
