"""Pytest configuration and shared fixtures.

Stores come seeded with the reference scenario: ``user-1`` at level 5
holding five ``herb-1`` and three ``water-1``, and ``recipe-1`` (Health
Potion) needing two herbs and one water at level 3 for 50 XP.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from alchemy_table.crafting.coordinator import CraftingCoordinator
from alchemy_table.models.crafting import Recipe, RecipeIngredient
from alchemy_table.storage.base import CraftingStore
from alchemy_table.storage.database import Database
from alchemy_table.storage.memory import InMemoryStore


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


USER_ID = "user-1"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from alchemy_table.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up environment variables for settings tests."""
    env_vars = {
        "ALCHEMY_TABLE_DEBUG": "true",
        "ALCHEMY_TABLE_LOG_LEVEL": "DEBUG",
        "ALCHEMY_TABLE_PROGRESSION_BASE_XP": "50",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def health_potion() -> Recipe:
    """The reference recipe."""
    return Recipe(
        id="recipe-1",
        name="Health Potion",
        required_level=3,
        result_item_id="potion-health",
        ingredients=[
            RecipeIngredient(ingredient_id="herb-1", quantity=2),
            RecipeIngredient(ingredient_id="water-1", quantity=1),
        ],
        xp_gained=50,
        is_active=True,
    )


@pytest.fixture
def catalog_recipes(health_potion: Recipe) -> list[Recipe]:
    """A small catalog around the reference recipe."""
    return [
        Recipe(
            id="recipe-elixir",
            name="Grand Elixir",
            required_level=10,
            result_item_id="elixir-grand",
            ingredients=[RecipeIngredient(ingredient_id="herb-1", quantity=4)],
            xp_gained=300,
        ),
        health_potion,
        Recipe(
            id="recipe-tea",
            name="Calming Tea",
            required_level=1,
            result_item_id="tea-calming",
            ingredients=[RecipeIngredient(ingredient_id="water-1", quantity=1)],
            xp_gained=10,
        ),
        Recipe(
            id="recipe-retired",
            name="Retired Tonic",
            required_level=1,
            result_item_id="tonic-old",
            ingredients=[RecipeIngredient(ingredient_id="herb-1", quantity=1)],
            xp_gained=5,
            is_active=False,
        ),
    ]


# =============================================================================
# Store Fixtures
# =============================================================================


def seed_store(store: CraftingStore, recipes: list[Recipe]) -> CraftingStore:
    """Load the reference scenario into a store."""
    for recipe in recipes:
        store.save_recipe(recipe)
    store.create_player_state(USER_ID, level=5, xp=100, total_xp=500)
    store.upsert_inventory_item(USER_ID, "herb-1", 5)
    store.upsert_inventory_item(USER_ID, "water-1", 3)
    return store


@pytest.fixture
def memory_store(catalog_recipes: list[Recipe]) -> InMemoryStore:
    """Seeded in-memory store."""
    store = InMemoryStore()
    seed_store(store, catalog_recipes)
    return store


@pytest.fixture
def sqlite_store(tmp_path: Path, catalog_recipes: list[Recipe]) -> Database:
    """Seeded SQLite store in a temporary directory."""
    store = Database(tmp_path / "alchemy.db")
    seed_store(store, catalog_recipes)
    return store


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest) -> CraftingStore:
    """Each seeded store implementation in turn."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("sqlite_store")


@pytest.fixture
def coordinator(store: CraftingStore) -> CraftingCoordinator:
    """Coordinator over the parametrized store."""
    return CraftingCoordinator(store)
