"""SQLite persistence layer for the crafting engine.

Provides persistent storage for:
- Player progression (level, xp, lifetime xp)
- Recipe definitions
- Per-player inventory rows

Atomic units of work take the database write lock up front with
``BEGIN IMMEDIATE``, so concurrent crafts serialize instead of interleaving.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Generator, TypeVar

from alchemy_table.core.config import StorageSettings
from alchemy_table.core.exceptions import StorageError
from alchemy_table.core.logging import get_logger
from alchemy_table.models.crafting import InventoryEntry, PlayerState, Recipe, RecipeIngredient
from alchemy_table.storage.base import CraftingStore


logger = get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# Row Mapping
# =============================================================================


def _player_from_row(row: sqlite3.Row) -> PlayerState:
    return PlayerState(
        user_id=row["user_id"],
        level=row["level"],
        xp=row["xp"],
        total_xp=row["total_xp"],
    )


def _recipe_from_row(row: sqlite3.Row) -> Recipe:
    ingredients = [RecipeIngredient(**item) for item in json.loads(row["ingredients_json"])]
    return Recipe(
        id=row["id"],
        name=row["name"],
        required_level=row["required_level"],
        result_item_id=row["result_item_id"],
        result_quantity=row["result_quantity"],
        ingredients=ingredients,
        xp_gained=row["xp_gained"],
        is_active=bool(row["is_active"]),
    )


def _entry_from_row(row: sqlite3.Row) -> InventoryEntry:
    return InventoryEntry(
        user_id=row["user_id"],
        item_id=row["item_id"],
        quantity=row["quantity"],
    )


# =============================================================================
# Database Class
# =============================================================================


class Database(CraftingStore):
    """SQLite implementation of the crafting store.

    Each call outside ``run_atomic`` uses a short-lived connection that
    commits on success. Inside ``run_atomic`` every call made on the same
    thread shares the transaction's connection.
    """

    SCHEMA_VERSION = 1

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        busy_timeout_seconds: float = 5.0,
    ) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the default location.
            busy_timeout_seconds: How long to wait for another writer's lock.
        """
        if db_path is None:
            self.db_path = self._get_default_path()
        else:
            self.db_path = Path(db_path)
        self.busy_timeout_seconds = busy_timeout_seconds
        self._local = threading.local()

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

        logger.info("database_initialized", path=str(self.db_path))

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> Database:
        """Create a database from storage settings."""
        return cls(
            settings.database_path,
            busy_timeout_seconds=settings.busy_timeout_seconds,
        )

    @staticmethod
    def _get_default_path() -> Path:
        return Path("data") / "alchemy_table.db"

    def _connect(self, *, autocommit: bool = False) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.busy_timeout_seconds,
            isolation_level=None if autocommit else "DEFERRED",
        )
        conn.row_factory = sqlite3.Row
        return conn

    @property
    def _atomic_connection(self) -> sqlite3.Connection | None:
        return getattr(self._local, "conn", None)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a connection, joining the current atomic unit if there is one."""
        shared = self._atomic_connection
        if shared is not None:
            yield shared
            return

        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database: {exc}", operation="connect") from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Database operation failed: {exc}") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS player_states (
                    user_id TEXT PRIMARY KEY,
                    level INTEGER NOT NULL CHECK (level >= 1),
                    xp INTEGER NOT NULL CHECK (xp >= 0),
                    total_xp INTEGER NOT NULL CHECK (total_xp >= 0),
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    required_level INTEGER NOT NULL,
                    result_item_id TEXT NOT NULL,
                    result_quantity INTEGER NOT NULL DEFAULT 1,
                    ingredients_json TEXT NOT NULL,
                    xp_gained INTEGER NOT NULL,
                    is_active INTEGER NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS player_inventory (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    quantity INTEGER NOT NULL CHECK (quantity >= 0),
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, item_id)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_recipes_active_level
                ON recipes(is_active, required_level)
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Transactions
    # =========================================================================

    def run_atomic(self, work: Callable[[], T]) -> T:
        """Run ``work`` inside one immediate transaction.

        Nested calls on the same thread join the outer transaction.

        Raises:
            StorageError: If SQLite fails to begin, execute or commit.
        """
        if self._atomic_connection is not None:
            return work()

        try:
            conn = self._connect(autocommit=True)
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as exc:
            raise StorageError(
                f"Cannot begin transaction: {exc}",
                operation="run_atomic",
            ) from exc

        self._local.conn = conn
        try:
            result = work()
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise StorageError(
                f"Transaction failed: {exc}",
                operation="run_atomic",
            ) from exc
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            self._local.conn = None
            conn.close()
        return result

    # =========================================================================
    # Player State Operations
    # =========================================================================

    def load_player_state(self, user_id: str) -> PlayerState | None:
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT user_id, level, xp, total_xp
                FROM player_states WHERE user_id = ?
            """, (user_id,)).fetchone()

        if row:
            return _player_from_row(row)
        return None

    def save_player_state(
        self,
        user_id: str,
        *,
        level: int,
        xp: int,
        total_xp: int,
    ) -> PlayerState:
        """Save a player's progression, creating the row if it does not exist."""
        now = datetime.now().isoformat()
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO player_states (user_id, level, xp, total_xp, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    level = excluded.level,
                    xp = excluded.xp,
                    total_xp = excluded.total_xp,
                    updated_at = excluded.updated_at
            """, (user_id, level, xp, total_xp, now))

        return PlayerState(user_id=user_id, level=level, xp=xp, total_xp=total_xp)

    def create_player_state(
        self,
        user_id: str,
        *,
        level: int = 1,
        xp: int = 0,
        total_xp: int = 0,
    ) -> PlayerState:
        """Create a player's progression row.

        Raises:
            StorageError: If the player already has one.
        """
        state = PlayerState(user_id=user_id, level=level, xp=xp, total_xp=total_xp)
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO player_states (user_id, level, xp, total_xp, updated_at)
                VALUES (?, ?, ?, ?, ?)
            """, (user_id, level, xp, total_xp, datetime.now().isoformat()))

        logger.info("player_state_created", user_id=user_id, level=level)
        return state

    # =========================================================================
    # Recipe Operations
    # =========================================================================

    def list_active_recipes(self) -> list[Recipe]:
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT id, name, required_level, result_item_id, result_quantity,
                       ingredients_json, xp_gained, is_active
                FROM recipes WHERE is_active = 1
                ORDER BY required_level ASC, name ASC, id ASC
            """).fetchall()

        return [_recipe_from_row(row) for row in rows]

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT id, name, required_level, result_item_id, result_quantity,
                       ingredients_json, xp_gained, is_active
                FROM recipes WHERE id = ?
            """, (recipe_id,)).fetchone()

        if row:
            return _recipe_from_row(row)
        return None

    def save_recipe(self, recipe: Recipe) -> Recipe:
        ingredients_json = json.dumps(
            [ingredient.model_dump() for ingredient in recipe.ingredients]
        )
        with self._get_connection() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO recipes
                (id, name, required_level, result_item_id, result_quantity,
                 ingredients_json, xp_gained, is_active)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (recipe.id, recipe.name, recipe.required_level, recipe.result_item_id,
                  recipe.result_quantity, ingredients_json, recipe.xp_gained,
                  int(recipe.is_active)))

        logger.info("recipe_saved", recipe_id=recipe.id, is_active=recipe.is_active)
        return recipe

    # =========================================================================
    # Inventory Operations
    # =========================================================================

    def list_inventory(self, user_id: str) -> list[InventoryEntry]:
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT user_id, item_id, quantity
                FROM player_inventory WHERE user_id = ?
                ORDER BY item_id ASC
            """, (user_id,)).fetchall()

        return [_entry_from_row(row) for row in rows]

    def get_inventory_item(self, user_id: str, item_id: str) -> InventoryEntry | None:
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT user_id, item_id, quantity
                FROM player_inventory WHERE user_id = ? AND item_id = ?
            """, (user_id, item_id)).fetchone()

        if row:
            return _entry_from_row(row)
        return None

    def decrement_inventory_item(self, user_id: str, item_id: str, amount: int) -> bool:
        """Decrement-if-sufficient in one statement; drop the row at zero."""
        with self._get_connection() as conn:
            cursor = conn.execute("""
                UPDATE player_inventory
                SET quantity = quantity - ?, updated_at = ?
                WHERE user_id = ? AND item_id = ? AND quantity >= ?
            """, (amount, datetime.now().isoformat(), user_id, item_id, amount))

            if cursor.rowcount == 0:
                return False

            conn.execute("""
                DELETE FROM player_inventory
                WHERE user_id = ? AND item_id = ? AND quantity = 0
            """, (user_id, item_id))

        return True

    def upsert_inventory_item(self, user_id: str, item_id: str, delta: int) -> InventoryEntry:
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO player_inventory (user_id, item_id, quantity, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id, item_id) DO UPDATE SET
                    quantity = quantity + excluded.quantity,
                    updated_at = excluded.updated_at
            """, (user_id, item_id, delta, datetime.now().isoformat()))

            row = conn.execute("""
                SELECT user_id, item_id, quantity
                FROM player_inventory WHERE user_id = ? AND item_id = ?
            """, (user_id, item_id)).fetchone()

        return _entry_from_row(row)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def get_stats(self) -> dict[str, Any]:
        """Row counts per table, for health checks."""
        with self._get_connection() as conn:
            return {
                "player_states": conn.execute("SELECT COUNT(*) FROM player_states").fetchone()[0],
                "recipes": conn.execute("SELECT COUNT(*) FROM recipes").fetchone()[0],
                "inventory_rows": conn.execute("SELECT COUNT(*) FROM player_inventory").fetchone()[0],
            }


def open_database(settings: StorageSettings) -> Database:
    """Open the SQLite store described by ``settings``."""
    return Database.from_settings(settings)
