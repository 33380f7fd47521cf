"""Read-only access to recipe definitions."""

from __future__ import annotations

from alchemy_table.core.exceptions import PlayerStateNotFoundError
from alchemy_table.models.crafting import Recipe
from alchemy_table.storage.base import CraftingStore


class RecipeCatalog:
    """Recipes a player can see and attempt."""

    def __init__(self, store: CraftingStore) -> None:
        self._store = store

    def list_available(self, user_id: str) -> list[Recipe]:
        """Active recipes ordered by required level, locked ones included.

        Raises:
            PlayerStateNotFoundError: If the user has no player state.
        """
        if self._store.load_player_state(user_id) is None:
            raise PlayerStateNotFoundError(user_id)

        recipes = [recipe for recipe in self._store.list_active_recipes() if recipe.is_active]
        return sorted(recipes, key=lambda recipe: recipe.required_level)

    def get_by_id(self, recipe_id: str) -> Recipe | None:
        return self._store.get_recipe(recipe_id)
