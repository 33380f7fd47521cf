"""Alchemy Table - crafting transaction engine.

Players craft recipes from ingredients in their inventory. A craft checks
the recipe, the player's level and the ingredients, then consumes the
ingredients, grants the crafted item and awards XP in one atomic commit.

Example:
    >>> from alchemy_table import InMemoryStore, CraftingCoordinator
    >>> store = InMemoryStore()
    >>> coordinator = CraftingCoordinator(store)
    >>> coordinator.craft("user-1", {"recipe_id": "recipe-1"})

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic schemas for recipes, players and inventory.
    storage: Persistence boundary, SQLite and in-memory stores.
    crafting: Catalog, progression, ledger and coordinator.
"""

from __future__ import annotations

# Core
from alchemy_table.core.config import Settings, get_settings
from alchemy_table.core.exceptions import (
    AlchemyTableError,
    CraftCommitError,
    CraftErrorKind,
    CraftingError,
    InsufficientIngredientsError,
    LevelTooLowError,
    PlayerStateNotFoundError,
    RecipeNotFoundError,
    RecipeUnavailableError,
    StorageError,
)
from alchemy_table.core.logging import configure_logging, get_logger

# Crafting
from alchemy_table.crafting import (
    CraftingCoordinator,
    ExponentialCurve,
    InventoryLedger,
    ProgressionTracker,
    RecipeCatalog,
    TableCurve,
    create_coordinator,
)

# Models
from alchemy_table.models import (
    CraftCheck,
    CraftOutcome,
    CraftRequest,
    CraftResult,
    InventoryEntry,
    PlayerState,
    Recipe,
    RecipeIngredient,
)

# Storage
from alchemy_table.storage import CraftingStore, Database, InMemoryStore


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "AlchemyTableError",
    "CraftErrorKind",
    "CraftingError",
    "PlayerStateNotFoundError",
    "RecipeNotFoundError",
    "RecipeUnavailableError",
    "LevelTooLowError",
    "InsufficientIngredientsError",
    "StorageError",
    "CraftCommitError",
    # Crafting
    "CraftingCoordinator",
    "create_coordinator",
    "RecipeCatalog",
    "InventoryLedger",
    "ProgressionTracker",
    "ExponentialCurve",
    "TableCurve",
    # Models
    "CraftCheck",
    "CraftOutcome",
    "CraftRequest",
    "CraftResult",
    "InventoryEntry",
    "PlayerState",
    "Recipe",
    "RecipeIngredient",
    # Storage
    "CraftingStore",
    "Database",
    "InMemoryStore",
]
