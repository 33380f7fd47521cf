"""Pure crafting eligibility rules.

Shared by the read-only ``check`` and by ``craft`` (before and inside the
commit), so both always agree on what is craftable.
"""

from __future__ import annotations

from collections.abc import Iterable

from alchemy_table.core.exceptions import CraftErrorKind
from alchemy_table.crafting.ledger import Shortfall, find_shortfalls, holdings_of
from alchemy_table.models.crafting import (
    CraftCheck,
    InventoryEntry,
    ItemRequirement,
    PlayerState,
    Recipe,
)


def meets_level_requirement(recipe: Recipe, level: int) -> bool:
    return level >= recipe.required_level


def missing_ingredients(recipe: Recipe, inventory: Iterable[InventoryEntry]) -> list[Shortfall]:
    return find_shortfalls(recipe.requirements(), holdings_of(inventory))


def level_message(recipe: Recipe) -> str:
    return f"Level {recipe.required_level} required"


def missing_message(shortfalls: Iterable[Shortfall]) -> str:
    parts = [f"{s.item_id} (need {s.required}, have {s.held})" for s in shortfalls]
    return "Missing required ingredients: " + ", ".join(parts)


def evaluate(
    recipe: Recipe,
    player: PlayerState,
    inventory: Iterable[InventoryEntry],
) -> CraftCheck:
    """Check availability, level, then ingredients; first failure wins."""
    if not recipe.is_active:
        return CraftCheck(
            can_craft=False,
            reason=CraftErrorKind.RECIPE_UNAVAILABLE,
            message="Recipe is not available",
        )

    if not meets_level_requirement(recipe, player.level):
        return CraftCheck(
            can_craft=False,
            reason=CraftErrorKind.LEVEL_TOO_LOW,
            message=level_message(recipe),
        )

    shortfalls = missing_ingredients(recipe, inventory)
    if shortfalls:
        return CraftCheck(
            can_craft=False,
            reason=CraftErrorKind.INSUFFICIENT_INGREDIENTS,
            message=missing_message(shortfalls),
            missing=[ItemRequirement(item_id=s.item_id, quantity=s.short_by) for s in shortfalls],
        )

    return CraftCheck(can_craft=True)
