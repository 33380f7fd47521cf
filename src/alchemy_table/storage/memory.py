"""In-memory crafting store.

Holds everything in dictionaries behind one re-entrant lock. ``run_atomic``
keeps the lock for the whole unit of work and restores a snapshot if the
work raises, which makes it a faithful stand-in for the SQLite store in
tests and demos.
"""

from __future__ import annotations

import copy
import threading
from typing import Callable, TypeVar

from alchemy_table.core.exceptions import StorageError
from alchemy_table.core.logging import get_logger
from alchemy_table.models.crafting import InventoryEntry, PlayerState, Recipe
from alchemy_table.storage.base import CraftingStore


logger = get_logger(__name__)

T = TypeVar("T")


class InMemoryStore(CraftingStore):
    """Transactional in-memory implementation of the crafting store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._players: dict[str, PlayerState] = {}
        self._recipes: dict[str, Recipe] = {}
        self._inventory: dict[tuple[str, str], int] = {}
        self._depth = 0

    # =========================================================================
    # Transactions
    # =========================================================================

    def _snapshot(self) -> tuple[dict[str, PlayerState], dict[str, Recipe], dict[tuple[str, str], int]]:
        return (
            copy.copy(self._players),
            copy.copy(self._recipes),
            copy.copy(self._inventory),
        )

    def run_atomic(self, work: Callable[[], T]) -> T:
        """Run ``work`` while holding the store lock; roll back on error.

        Nested calls join the outer unit of work.
        """
        with self._lock:
            if self._depth:
                return work()

            snapshot = self._snapshot()
            self._depth += 1
            try:
                return work()
            except BaseException:
                self._players, self._recipes, self._inventory = snapshot
                logger.debug("memory_store_rolled_back")
                raise
            finally:
                self._depth -= 1

    # =========================================================================
    # Player State Operations
    # =========================================================================

    def load_player_state(self, user_id: str) -> PlayerState | None:
        with self._lock:
            return self._players.get(user_id)

    def save_player_state(
        self,
        user_id: str,
        *,
        level: int,
        xp: int,
        total_xp: int,
    ) -> PlayerState:
        state = PlayerState(user_id=user_id, level=level, xp=xp, total_xp=total_xp)
        with self._lock:
            self._players[user_id] = state
        return state

    def create_player_state(
        self,
        user_id: str,
        *,
        level: int = 1,
        xp: int = 0,
        total_xp: int = 0,
    ) -> PlayerState:
        state = PlayerState(user_id=user_id, level=level, xp=xp, total_xp=total_xp)
        with self._lock:
            if user_id in self._players:
                raise StorageError(
                    f"Player state already exists for {user_id!r}",
                    operation="create_player_state",
                )
            self._players[user_id] = state
        return state

    # =========================================================================
    # Recipe Operations
    # =========================================================================

    def list_active_recipes(self) -> list[Recipe]:
        with self._lock:
            return [recipe for recipe in self._recipes.values() if recipe.is_active]

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        with self._lock:
            return self._recipes.get(recipe_id)

    def save_recipe(self, recipe: Recipe) -> Recipe:
        with self._lock:
            self._recipes[recipe.id] = recipe
        return recipe

    # =========================================================================
    # Inventory Operations
    # =========================================================================

    def list_inventory(self, user_id: str) -> list[InventoryEntry]:
        with self._lock:
            return [
                InventoryEntry(user_id=owner, item_id=item_id, quantity=quantity)
                for (owner, item_id), quantity in sorted(self._inventory.items())
                if owner == user_id
            ]

    def get_inventory_item(self, user_id: str, item_id: str) -> InventoryEntry | None:
        with self._lock:
            quantity = self._inventory.get((user_id, item_id))
        if quantity is None:
            return None
        return InventoryEntry(user_id=user_id, item_id=item_id, quantity=quantity)

    def decrement_inventory_item(self, user_id: str, item_id: str, amount: int) -> bool:
        key = (user_id, item_id)
        with self._lock:
            held = self._inventory.get(key, 0)
            if held < amount:
                return False
            remaining = held - amount
            if remaining == 0:
                del self._inventory[key]
            else:
                self._inventory[key] = remaining
        return True

    def upsert_inventory_item(self, user_id: str, item_id: str, delta: int) -> InventoryEntry:
        key = (user_id, item_id)
        with self._lock:
            quantity = self._inventory.get(key, 0) + delta
            self._inventory[key] = quantity
        return InventoryEntry(user_id=user_id, item_id=item_id, quantity=quantity)
