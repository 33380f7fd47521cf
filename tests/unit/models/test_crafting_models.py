"""Tests for the crafting models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from alchemy_table.core.exceptions import CraftErrorKind
from alchemy_table.models.crafting import (
    CraftOutcome,
    CraftRequest,
    CraftResult,
    ItemRequirement,
    PlayerState,
    Recipe,
    RecipeIngredient,
    XpProgress,
)


class TestRecipe:
    """Tests for Recipe validation."""

    def test_requirements_follow_ingredients(self, health_potion: Recipe) -> None:
        assert health_potion.requirements() == [
            ItemRequirement(item_id="herb-1", quantity=2),
            ItemRequirement(item_id="water-1", quantity=1),
        ]

    def test_defaults(self, health_potion: Recipe) -> None:
        assert health_potion.result_quantity == 1
        assert health_potion.is_active is True

    def test_ingredients_required(self) -> None:
        with pytest.raises(ValidationError):
            Recipe(id="r", result_item_id="x", ingredients=[])

    def test_duplicate_ingredient_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate ingredient"):
            Recipe(
                id="r",
                result_item_id="x",
                ingredients=[
                    RecipeIngredient(ingredient_id="herb-1", quantity=1),
                    RecipeIngredient(ingredient_id="herb-1", quantity=2),
                ],
            )

    def test_ingredient_quantity_positive(self) -> None:
        with pytest.raises(ValidationError):
            RecipeIngredient(ingredient_id="herb-1", quantity=0)

    def test_negative_required_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Recipe(
                id="r",
                result_item_id="x",
                required_level=-1,
                ingredients=[RecipeIngredient(ingredient_id="herb-1", quantity=1)],
            )

    def test_recipes_are_frozen(self, health_potion: Recipe) -> None:
        with pytest.raises(ValidationError):
            health_potion.xp_gained = 1000


class TestPlayerState:
    """Tests for PlayerState constraints."""

    def test_level_starts_at_one(self) -> None:
        with pytest.raises(ValidationError):
            PlayerState(user_id="u", level=0)

    def test_xp_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            PlayerState(user_id="u", xp=-1)


class TestCraftOutcome:
    """Tests for the craft result type."""

    def test_success_side(self) -> None:
        result = CraftResult(crafted_item_id="potion-health", xp_gained=50, new_total_xp=550, new_level=5)
        outcome = CraftOutcome(result=result)

        assert outcome.ok
        assert outcome.error is None

    def test_error_side(self) -> None:
        outcome = CraftOutcome(error=CraftErrorKind.LEVEL_TOO_LOW, message="Level 3 required")

        assert not outcome.ok
        assert outcome.error == "level_too_low"

    def test_needs_exactly_one_side(self) -> None:
        with pytest.raises(ValidationError):
            CraftOutcome()


class TestCraftRequest:
    """Tests for CraftRequest parsing."""

    def test_from_mapping(self) -> None:
        assert CraftRequest.model_validate({"recipe_id": "recipe-1"}).recipe_id == "recipe-1"

    def test_empty_recipe_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CraftRequest(recipe_id="")


class TestXpProgress:
    """Tests for XpProgress percent."""

    def test_percent(self) -> None:
        assert XpProgress(level=1, xp_in_level=141, xp_needed=282).percent == pytest.approx(50.0)

    def test_max_level_percent_is_zero(self) -> None:
        assert XpProgress(level=20, xp_in_level=999).percent == 0.0
