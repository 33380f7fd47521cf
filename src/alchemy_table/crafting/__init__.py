"""Crafting engine: catalog, progression, inventory ledger and coordinator.

Exports:
    RecipeCatalog: Read-only recipe access.
    ProgressionTracker: Level/XP state and the leveling curve.
    InventoryLedger: Per-player item quantities.
    CraftingCoordinator: Validate-then-commit crafting.
"""

from __future__ import annotations

from alchemy_table.crafting.catalog import RecipeCatalog
from alchemy_table.crafting.coordinator import CraftingCoordinator, create_coordinator
from alchemy_table.crafting.ledger import InventoryLedger, Shortfall
from alchemy_table.crafting.progression import (
    ExponentialCurve,
    LevelingCurve,
    ProgressionTracker,
    TableCurve,
    curve_from_settings,
)


__all__ = [
    "RecipeCatalog",
    "ProgressionTracker",
    "LevelingCurve",
    "ExponentialCurve",
    "TableCurve",
    "curve_from_settings",
    "InventoryLedger",
    "Shortfall",
    "CraftingCoordinator",
    "create_coordinator",
]
