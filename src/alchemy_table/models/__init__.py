"""Pydantic models for recipes, player progression and inventory."""

from __future__ import annotations

from alchemy_table.models.crafting import (
    CraftCheck,
    CraftOutcome,
    CraftRequest,
    CraftResult,
    InventoryEntry,
    ItemRequirement,
    PlayerState,
    Recipe,
    RecipeIngredient,
    XpProgress,
)


__all__ = [
    "CraftCheck",
    "CraftOutcome",
    "CraftRequest",
    "CraftResult",
    "InventoryEntry",
    "ItemRequirement",
    "PlayerState",
    "Recipe",
    "RecipeIngredient",
    "XpProgress",
]
