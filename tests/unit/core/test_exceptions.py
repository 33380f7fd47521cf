"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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


class TestAlchemyTableError:
    """Tests for the base AlchemyTableError exception."""

    def test_basic_message(self) -> None:
        exc = AlchemyTableError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        exc = AlchemyTableError("Test error", details={"key": "value", "count": 42})
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        repr_str = repr(AlchemyTableError("Test", details={"x": 1}))
        assert "AlchemyTableError" in repr_str
        assert "x" in repr_str


class TestCraftingErrors:
    """Tests for the five business-rule errors."""

    @pytest.mark.parametrize(
        ("exc", "kind"),
        [
            (PlayerStateNotFoundError("user-1"), CraftErrorKind.PLAYER_STATE_NOT_FOUND),
            (RecipeNotFoundError("missing"), CraftErrorKind.RECIPE_NOT_FOUND),
            (RecipeUnavailableError("recipe-1"), CraftErrorKind.RECIPE_UNAVAILABLE),
            (LevelTooLowError(required_level=3), CraftErrorKind.LEVEL_TOO_LOW),
            (InsufficientIngredientsError(), CraftErrorKind.INSUFFICIENT_INGREDIENTS),
        ],
    )
    def test_each_error_has_distinct_kind(self, exc: CraftingError, kind: CraftErrorKind) -> None:
        assert exc.kind == kind
        assert isinstance(exc, CraftingError)
        assert isinstance(exc, AlchemyTableError)

    def test_level_message_embeds_required_level(self) -> None:
        exc = LevelTooLowError(required_level=3, current_level=2)
        assert exc.message == "Level 3 required"
        assert exc.details["required_level"] == 3
        assert exc.details["current_level"] == 2

    def test_insufficient_ingredients_carries_missing(self) -> None:
        missing = [{"item_id": "herb-1", "quantity": 1}]
        exc = InsufficientIngredientsError(missing=missing)
        assert exc.missing == missing
        assert exc.details["missing"] == missing

    def test_context_in_details(self) -> None:
        assert PlayerStateNotFoundError("user-9").details["user_id"] == "user-9"
        assert RecipeNotFoundError("nope").details["recipe_id"] == "nope"


class TestStorageErrors:
    """Storage failures are kept apart from business rules."""

    def test_commit_error_is_not_a_crafting_error(self) -> None:
        exc = CraftCommitError("boom", operation="craft")
        assert isinstance(exc, StorageError)
        assert not isinstance(exc, CraftingError)
        assert exc.details["operation"] == "craft"

    def test_contract_error_is_storage_error(self) -> None:
        assert isinstance(InventoryContractError("short"), StorageError)

    def test_configuration_error(self) -> None:
        exc = ConfigurationError("Bad curve", config_key="thresholds")
        assert exc.details["config_key"] == "thresholds"


class TestExceptionChaining:
    """Tests for exception chaining behavior."""

    def test_raise_from(self) -> None:
        original = RuntimeError("disk full")

        with pytest.raises(CraftCommitError) as exc_info:
            try:
                raise original
            except RuntimeError as e:
                raise CraftCommitError("Commit failed") from e

        assert exc_info.value.__cause__ is original
