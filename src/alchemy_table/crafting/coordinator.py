"""Crafting transaction coordinator.

``craft`` is the only mutating entry point of the engine. It runs a fixed
validation pipeline and then a single atomic commit:

    Start -> RecipeFound -> Active -> PlayerFound -> LevelOk
          -> IngredientsOk -> Committed

Any checkpoint before Committed can end in a typed CraftingError, and no
persisted data changes on that path. The commit re-reads the player's
state and inventory inside the store's isolation boundary, so two
concurrent crafts competing for the same ingredients cannot both succeed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from alchemy_table.core.config import Settings, get_settings
from alchemy_table.core.exceptions import (
    CraftCommitError,
    CraftErrorKind,
    CraftingError,
    InsufficientIngredientsError,
    LevelTooLowError,
    PlayerStateNotFoundError,
    RecipeNotFoundError,
    RecipeUnavailableError,
)
from alchemy_table.core.logging import bind_context, get_logger, unbind_context
from alchemy_table.crafting import rules
from alchemy_table.crafting.catalog import RecipeCatalog
from alchemy_table.crafting.ledger import InventoryLedger
from alchemy_table.crafting.progression import ProgressionTracker, curve_from_settings
from alchemy_table.models.crafting import (
    CraftCheck,
    CraftOutcome,
    CraftRequest,
    CraftResult,
    InventoryEntry,
    PlayerState,
    Recipe,
)
from alchemy_table.storage.base import CraftingStore
from alchemy_table.storage.database import open_database


logger = get_logger(__name__)


def _error_for(check: CraftCheck, recipe: Recipe, player: PlayerState) -> CraftingError:
    """Turn a failed check into the matching exception."""
    if check.reason == CraftErrorKind.RECIPE_UNAVAILABLE:
        return RecipeUnavailableError(recipe.id)
    if check.reason == CraftErrorKind.LEVEL_TOO_LOW:
        return LevelTooLowError(required_level=recipe.required_level, current_level=player.level)
    return InsufficientIngredientsError(
        check.message or "Missing required ingredients",
        missing=[requirement.model_dump() for requirement in check.missing],
    )


class CraftingCoordinator:
    """Validates craft requests and commits them atomically.

    Attributes:
        catalog: Recipe lookups.
        ledger: Inventory reads and writes.
        progression: Player level and XP.
    """

    def __init__(
        self,
        store: CraftingStore,
        *,
        catalog: RecipeCatalog | None = None,
        ledger: InventoryLedger | None = None,
        progression: ProgressionTracker | None = None,
    ) -> None:
        self._store = store
        self.catalog = catalog or RecipeCatalog(store)
        self.ledger = ledger or InventoryLedger(store)
        self.progression = progression or ProgressionTracker(store)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_recipes(self, user_id: str) -> list[Recipe]:
        """Active recipes for a known player, ordered by required level.

        Raises:
            PlayerStateNotFoundError: If the user has no player state.
        """
        return self.catalog.list_available(user_id)

    def check(self, user_id: str, recipe_id: str) -> CraftCheck:
        """Evaluate a craft without attempting it.

        Uses the same rules and order as ``craft``; never writes.
        """
        recipe = self.catalog.get_by_id(recipe_id)
        if recipe is None:
            return CraftCheck(
                can_craft=False,
                reason=CraftErrorKind.RECIPE_NOT_FOUND,
                message="Recipe not found",
            )
        if not recipe.is_active:
            return CraftCheck(
                can_craft=False,
                reason=CraftErrorKind.RECIPE_UNAVAILABLE,
                message="Recipe is not available",
            )

        player = self.progression.get(user_id)
        if player is None:
            return CraftCheck(
                can_craft=False,
                reason=CraftErrorKind.PLAYER_STATE_NOT_FOUND,
                message="Player state not found",
            )
        return rules.evaluate(recipe, player, self.ledger.list_for(user_id))

    # =========================================================================
    # Crafting
    # =========================================================================

    def craft(self, user_id: str, request: CraftRequest | Mapping[str, Any]) -> CraftResult:
        """Craft a recipe for a player.

        Args:
            user_id: The crafting player.
            request: A CraftRequest or a mapping with ``recipe_id``.

        Returns:
            The committed result.

        Raises:
            RecipeNotFoundError: No recipe with that id.
            RecipeUnavailableError: The recipe is inactive.
            PlayerStateNotFoundError: The user has no player state.
            LevelTooLowError: The player's level is below the recipe's.
            InsufficientIngredientsError: Some ingredient is short.
            CraftCommitError: The commit failed for a non-business reason;
                nothing was written.
        """
        craft_request = (
            request if isinstance(request, CraftRequest) else CraftRequest.model_validate(request)
        )
        bind_context(user_id=user_id, recipe_id=craft_request.recipe_id)
        try:
            return self._craft(user_id, craft_request.recipe_id)
        except CraftingError as exc:
            logger.info("craft_rejected", kind=str(exc.kind), reason=exc.message)
            raise
        finally:
            unbind_context("user_id", "recipe_id")

    def try_craft(self, user_id: str, request: CraftRequest | Mapping[str, Any]) -> CraftOutcome:
        """Like ``craft``, but business-rule failures come back as a value.

        Storage failures are still raised.
        """
        try:
            result = self.craft(user_id, request)
        except CraftingError as exc:
            return CraftOutcome(error=exc.kind, message=exc.message, details=exc.details)
        return CraftOutcome(result=result)

    def _craft(self, user_id: str, recipe_id: str) -> CraftResult:
        recipe = self.catalog.get_by_id(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        if not recipe.is_active:
            raise RecipeUnavailableError(recipe_id)

        player = self.progression.get(user_id)
        if player is None:
            raise PlayerStateNotFoundError(user_id)

        self._ensure_craftable(recipe, player, self.ledger.list_for(user_id))

        try:
            result = self._store.run_atomic(lambda: self._commit(user_id, recipe))
        except CraftingError:
            raise
        except Exception as exc:
            logger.error("craft_commit_failed", error=str(exc), error_type=type(exc).__name__)
            raise CraftCommitError(
                f"Craft commit failed: {exc}",
                operation="craft",
                details={"user_id": user_id, "recipe_id": recipe_id},
            ) from exc

        logger.info(
            "craft_committed",
            crafted_item_id=result.crafted_item_id,
            xp_gained=result.xp_gained,
            new_level=result.new_level,
            leveled_up=result.leveled_up,
        )
        return result

    def _ensure_craftable(
        self,
        recipe: Recipe,
        player: PlayerState,
        inventory: list[InventoryEntry],
    ) -> None:
        check = rules.evaluate(recipe, player, inventory)
        if not check.can_craft:
            raise _error_for(check, recipe, player)

    def _commit(self, user_id: str, recipe: Recipe) -> CraftResult:
        """Apply a validated craft; runs inside ``run_atomic``."""
        # Re-read under isolation: a concurrent craft may have committed since validation
        player = self.progression.get(user_id)
        if player is None:
            raise PlayerStateNotFoundError(user_id)
        self._ensure_craftable(recipe, player, self.ledger.list_for(user_id))

        self.ledger.consume(user_id, recipe.requirements())
        self.ledger.grant(user_id, recipe.result_item_id, recipe.result_quantity)
        updated = self.progression.save(self.progression.apply_xp(player, recipe.xp_gained))

        return CraftResult(
            success=True,
            crafted_item_id=recipe.result_item_id,
            xp_gained=recipe.xp_gained,
            quantity=recipe.result_quantity,
            new_total_xp=updated.total_xp,
            new_level=updated.level,
            leveled_up=updated.level > player.level,
        )


def create_coordinator(
    settings: Settings | None = None,
    store: CraftingStore | None = None,
) -> CraftingCoordinator:
    """Build a coordinator from settings.

    Args:
        settings: Application settings; loaded from the environment if None.
        store: Store to use; the configured SQLite database if None.

    Returns:
        A ready coordinator.
    """
    settings = settings or get_settings()
    store = store or open_database(settings.storage)
    return CraftingCoordinator(
        store,
        progression=ProgressionTracker(store, curve_from_settings(settings.progression)),
    )
