"""Storage module for crafting persistence.

Provides:
- CraftingStore: the persistence boundary the engine depends on
- Database: SQLite implementation
- InMemoryStore: transactional in-memory implementation
"""

from alchemy_table.storage.base import CraftingStore
from alchemy_table.storage.database import Database, open_database
from alchemy_table.storage.memory import InMemoryStore

__all__ = [
    "CraftingStore",
    "Database",
    "InMemoryStore",
    "open_database",
]
