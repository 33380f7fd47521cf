"""Pydantic models for the crafting engine.

Recipes, player progression and inventory rows are immutable values.
Stores hand them out and take them back; nothing mutates them in place,
so a model read before a commit can never be changed by that commit.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from alchemy_table.core.exceptions import CraftErrorKind


class _Value(BaseModel):
    """Base for immutable crafting values."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Recipes
# =============================================================================


class RecipeIngredient(_Value):
    """One ingredient line of a recipe."""

    ingredient_id: str = Field(min_length=1, description="Item consumed")
    quantity: int = Field(gt=0, description="Units consumed per craft")


class ItemRequirement(_Value):
    """An amount of an item the ledger is asked about or to consume."""

    item_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)


class Recipe(_Value):
    """A rule mapping ingredients to one crafted output plus an XP reward.

    Only active recipes are offered or craftable.
    """

    id: str = Field(min_length=1)
    name: str = Field(default="")
    required_level: int = Field(default=1, ge=0, description="Minimum player level")
    result_item_id: str = Field(min_length=1, description="Item produced")
    result_quantity: int = Field(default=1, ge=1, description="Units produced per craft")
    ingredients: list[RecipeIngredient] = Field(min_length=1)
    xp_gained: int = Field(default=0, ge=0)
    is_active: bool = Field(default=True)

    @field_validator("ingredients", mode="after")
    @classmethod
    def ingredient_ids_unique(cls, value: list[RecipeIngredient]) -> list[RecipeIngredient]:
        """Reject recipes that list the same ingredient twice."""
        seen: set[str] = set()
        for ingredient in value:
            if ingredient.ingredient_id in seen:
                raise ValueError(f"Duplicate ingredient {ingredient.ingredient_id!r} in recipe")
            seen.add(ingredient.ingredient_id)
        return value

    def requirements(self) -> list[ItemRequirement]:
        """Ingredients as ledger requirements, in recipe order."""
        return [
            ItemRequirement(item_id=ingredient.ingredient_id, quantity=ingredient.quantity)
            for ingredient in self.ingredients
        ]


# =============================================================================
# Player & Inventory
# =============================================================================


class PlayerState(_Value):
    """A player's level and XP progression.

    ``xp`` is progress toward the next level; ``total_xp`` is lifetime XP.
    """

    user_id: str = Field(min_length=1)
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    total_xp: int = Field(default=0, ge=0)


class InventoryEntry(_Value):
    """Quantity of one item held by one player."""

    user_id: str = Field(min_length=1)
    item_id: str = Field(min_length=1)
    quantity: int = Field(ge=0)


class XpProgress(_Value):
    """Progress within the current level, for progress bars."""

    level: int = Field(ge=1)
    xp_in_level: int = Field(ge=0)
    xp_needed: int | None = Field(default=None, description="None at max level")

    @computed_field(description="Percent of the current level completed")
    @property
    def percent(self) -> float:
        if not self.xp_needed:
            return 0.0
        return min(100.0, self.xp_in_level / self.xp_needed * 100)


# =============================================================================
# Craft Requests & Results
# =============================================================================


class CraftRequest(_Value):
    """Caller input for a craft."""

    recipe_id: str = Field(min_length=1)


class CraftResult(_Value):
    """Outcome of a committed craft."""

    success: bool = True
    crafted_item_id: str
    xp_gained: int = Field(ge=0)
    quantity: int = Field(default=1, ge=1, description="Units of the crafted item granted")
    new_total_xp: int = Field(ge=0)
    new_level: int = Field(ge=1)
    leveled_up: bool = False


class CraftCheck(_Value):
    """Read-only verdict on whether a player could craft a recipe now."""

    can_craft: bool
    reason: CraftErrorKind | None = None
    message: str | None = None
    missing: list[ItemRequirement] = Field(
        default_factory=list,
        description="Shortfall per ingredient (amount still needed)",
    )


class CraftOutcome(_Value):
    """Result type for a craft: either a result or an error kind."""

    result: CraftResult | None = None
    error: CraftErrorKind | None = None
    message: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def exactly_one_side(self) -> Self:
        if (self.result is None) == (self.error is None):
            raise ValueError("CraftOutcome needs exactly one of result or error")
        return self

    @property
    def ok(self) -> bool:
        return self.result is not None
