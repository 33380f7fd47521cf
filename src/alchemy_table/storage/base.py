"""Persistence boundary consumed by the crafting engine.

The engine never talks to a database directly. Catalog, ledger, progression
tracker and coordinator all receive a CraftingStore at construction time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, TypeVar

from alchemy_table.models.crafting import InventoryEntry, PlayerState, Recipe


T = TypeVar("T")


# =============================================================================
# Store Interface
# =============================================================================


class CraftingStore(ABC):
    """Abstract base class for crafting persistence.

    Every method called from inside ``run_atomic`` joins that unit of work.
    """

    # -------------------------------------------------------------------------
    # Player state
    # -------------------------------------------------------------------------

    @abstractmethod
    def load_player_state(self, user_id: str) -> PlayerState | None:
        """Load a player's progression, or None if the player has none."""
        ...

    @abstractmethod
    def save_player_state(
        self,
        user_id: str,
        *,
        level: int,
        xp: int,
        total_xp: int,
    ) -> PlayerState:
        """Overwrite an existing player's progression."""
        ...

    @abstractmethod
    def create_player_state(
        self,
        user_id: str,
        *,
        level: int = 1,
        xp: int = 0,
        total_xp: int = 0,
    ) -> PlayerState:
        """Create a player's progression row (onboarding)."""
        ...

    # -------------------------------------------------------------------------
    # Recipes
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_active_recipes(self) -> list[Recipe]:
        """All recipes with ``is_active`` set, in no guaranteed order."""
        ...

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Look up a recipe regardless of whether it is active."""
        ...

    @abstractmethod
    def save_recipe(self, recipe: Recipe) -> Recipe:
        """Insert or replace a recipe (catalog management)."""
        ...

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_inventory(self, user_id: str) -> list[InventoryEntry]:
        """All inventory rows held by a player."""
        ...

    @abstractmethod
    def get_inventory_item(self, user_id: str, item_id: str) -> InventoryEntry | None:
        """One inventory row, or None if the player holds none of the item."""
        ...

    @abstractmethod
    def decrement_inventory_item(self, user_id: str, item_id: str, amount: int) -> bool:
        """Decrement a row only if it holds at least ``amount``.

        The row is deleted when its quantity reaches zero.

        Returns:
            True if the decrement happened, False if nothing was written.
        """
        ...

    @abstractmethod
    def upsert_inventory_item(self, user_id: str, item_id: str, delta: int) -> InventoryEntry:
        """Increment a row by ``delta``, creating it if absent."""
        ...

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @abstractmethod
    def run_atomic(self, work: Callable[[], T]) -> T:
        """Run ``work`` in full isolation.

        Any exception raised by ``work`` discards every write it made and
        propagates unchanged.
        """
        ...

    def close(self) -> None:
        """Release any resources held by the store."""
