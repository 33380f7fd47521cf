"""Integration tests for a full crafting session.

Builds the coordinator from settings the way an application would and
drives it through a realistic sequence of crafts.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from alchemy_table import create_coordinator
from alchemy_table.core.config import ProgressionSettings, Settings, StorageSettings
from alchemy_table.core.exceptions import InsufficientIngredientsError, LevelTooLowError
from alchemy_table.crafting.progression import TableCurve
from alchemy_table.models.crafting import Recipe
from alchemy_table.storage.database import Database


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        storage=StorageSettings(database_path=tmp_path / "flow.db"),
        progression=ProgressionSettings(curve="table", thresholds=[100, 200, 400, 800, 1600]),
    )


class TestCraftingSession:
    """End-to-end crafting against SQLite."""

    def test_settings_drive_the_curve(self, settings: Settings) -> None:
        coordinator = create_coordinator(settings)

        assert isinstance(coordinator.progression.curve, TableCurve)
        assert coordinator.progression.curve.max_level == 6

    def test_session(self, settings: Settings, catalog_recipes: list[Recipe]) -> None:
        store = Database.from_settings(settings.storage)
        for recipe in catalog_recipes:
            store.save_recipe(recipe)
        store.create_player_state("apprentice")
        store.upsert_inventory_item("apprentice", "water-1", 4)
        store.upsert_inventory_item("apprentice", "herb-1", 2)
        coordinator = create_coordinator(settings, store=store)

        # Level 1: the potion is visible but locked
        recipes = coordinator.get_recipes("apprentice")
        assert [r.id for r in recipes] == ["recipe-tea", "recipe-1", "recipe-elixir"]
        with pytest.raises(LevelTooLowError, match="Level 3 required"):
            coordinator.craft("apprentice", {"recipe_id": "recipe-1"})

        # Tea pays 10 XP; ten brews would be needed for level 2, four are possible
        for _ in range(3):
            coordinator.craft("apprentice", {"recipe_id": "recipe-tea"})
        result = coordinator.craft("apprentice", {"recipe_id": "recipe-tea"})
        assert result.new_total_xp == 40
        assert result.new_level == 1

        with pytest.raises(InsufficientIngredientsError):
            coordinator.craft("apprentice", {"recipe_id": "recipe-tea"})

        # Promote and craft the potion; the water has run out though
        store.save_player_state("apprentice", level=3, xp=0, total_xp=340)
        check = coordinator.check("apprentice", "recipe-1")
        assert not check.can_craft
        assert [m.item_id for m in check.missing] == ["water-1"]

        store.upsert_inventory_item("apprentice", "water-1", 1)
        result = coordinator.craft("apprentice", {"recipe_id": "recipe-1"})
        assert result.crafted_item_id == "potion-health"

        inventory = {e.item_id: e.quantity for e in store.list_inventory("apprentice")}
        assert inventory == {"tea-calming": 4, "potion-health": 1}
        player = store.load_player_state("apprentice")
        assert (player.level, player.xp, player.total_xp) == (3, 50, 390)
