"""Per-player inventory ledger.

Quantities only move through ``consume`` and ``grant``. Consumption is a
guarded decrement per item: the store refuses to take more than a row
holds, so an inventory row can never go negative even if a caller skipped
the sufficiency check.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import NamedTuple

from alchemy_table.core.exceptions import InventoryContractError
from alchemy_table.core.logging import get_logger
from alchemy_table.models.crafting import InventoryEntry, ItemRequirement
from alchemy_table.storage.base import CraftingStore


logger = get_logger(__name__)


class Shortfall(NamedTuple):
    """An item a player holds too little of."""

    item_id: str
    required: int
    held: int

    @property
    def short_by(self) -> int:
        return self.required - self.held


def merge_requirements(requirements: Iterable[ItemRequirement]) -> dict[str, int]:
    """Sum requirements per item, keeping first-seen order."""
    totals: dict[str, int] = {}
    for requirement in requirements:
        totals[requirement.item_id] = totals.get(requirement.item_id, 0) + requirement.quantity
    return totals


def find_shortfalls(
    requirements: Iterable[ItemRequirement],
    holdings: Mapping[str, int],
) -> list[Shortfall]:
    """Compare requirements against held quantities; absent items count as zero."""
    return [
        Shortfall(item_id, required, holdings.get(item_id, 0))
        for item_id, required in merge_requirements(requirements).items()
        if holdings.get(item_id, 0) < required
    ]


def holdings_of(entries: Iterable[InventoryEntry]) -> dict[str, int]:
    return {entry.item_id: entry.quantity for entry in entries}


class InventoryLedger:
    """Inventory reads and writes for crafting."""

    def __init__(self, store: CraftingStore) -> None:
        self._store = store

    def list_for(self, user_id: str) -> list[InventoryEntry]:
        return self._store.list_inventory(user_id)

    def quantity_of(self, user_id: str, item_id: str) -> int:
        entry = self._store.get_inventory_item(user_id, item_id)
        return entry.quantity if entry else 0

    def missing(self, user_id: str, requirements: Iterable[ItemRequirement]) -> list[Shortfall]:
        return find_shortfalls(requirements, holdings_of(self.list_for(user_id)))

    def has_sufficient(self, user_id: str, requirements: Iterable[ItemRequirement]) -> bool:
        """True iff every requirement is covered by the player's inventory."""
        return not self.missing(user_id, requirements)

    def consume(self, user_id: str, requirements: Iterable[ItemRequirement]) -> None:
        """Take every requirement out of the player's inventory, all or nothing.

        Raises:
            InventoryContractError: If any row holds less than required. No
                decrement from this call survives.
        """
        totals = merge_requirements(requirements)

        def work() -> None:
            for item_id, quantity in totals.items():
                if not self._store.decrement_inventory_item(user_id, item_id, quantity):
                    raise InventoryContractError(
                        f"Cannot consume {quantity} x {item_id}: not enough held",
                        operation="decrement_inventory_item",
                        details={"user_id": user_id, "item_id": item_id, "quantity": quantity},
                    )

        self._store.run_atomic(work)
        logger.debug("inventory_consumed", user_id=user_id, items=totals)

    def grant(self, user_id: str, item_id: str, quantity: int = 1) -> InventoryEntry:
        """Add items, creating the row on first acquisition."""
        if quantity <= 0:
            raise ValueError(f"quantity must be > 0, got {quantity}")
        entry = self._store.upsert_inventory_item(user_id, item_id, quantity)
        logger.debug("inventory_granted", user_id=user_id, item_id=item_id, quantity=quantity)
        return entry
