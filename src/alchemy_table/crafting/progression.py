"""Player level progression.

The tracker owns the rule that turns earned XP into levels. The rule itself
is a LevelingCurve: given a level, how much XP it takes to reach the next
one. Curves are plain objects, so they can be swapped per deployment and
tested on their own.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

from alchemy_table.core.config import ProgressionSettings
from alchemy_table.core.logging import get_logger
from alchemy_table.models.crafting import PlayerState, XpProgress
from alchemy_table.storage.base import CraftingStore


logger = get_logger(__name__)


# =============================================================================
# Leveling Curves
# =============================================================================


class LevelingCurve(ABC):
    """XP required to advance from each level to the next."""

    @abstractmethod
    def xp_for_next_level(self, level: int) -> int | None:
        """XP needed to go from ``level`` to ``level + 1``.

        Returns:
            A positive amount, or None when ``level`` is the highest level.
        """
        ...


class ExponentialCurve(LevelingCurve):
    """``floor(base_xp * (level + 1) ** exponent)`` XP per level.

    With the defaults, leaving level 1 costs 282 XP and leaving level 2
    costs 519 XP.
    """

    def __init__(self, base_xp: int = 100, exponent: float = 1.5, max_level: int = 1000) -> None:
        if base_xp < 1:
            raise ValueError(f"base_xp must be >= 1, got {base_xp}")
        if exponent <= 0:
            raise ValueError(f"exponent must be > 0, got {exponent}")
        if max_level < 1:
            raise ValueError(f"max_level must be >= 1, got {max_level}")
        self.base_xp = base_xp
        self.exponent = exponent
        self.max_level = max_level

    def xp_for_next_level(self, level: int) -> int | None:
        if level < 1:
            raise ValueError(f"level must be >= 1, got {level}")
        if level >= self.max_level:
            return None
        return max(1, math.floor(self.base_xp * (level + 1) ** self.exponent))

    def __repr__(self) -> str:
        return (
            f"ExponentialCurve(base_xp={self.base_xp}, exponent={self.exponent}, "
            f"max_level={self.max_level})"
        )


class TableCurve(LevelingCurve):
    """Explicit thresholds: ``thresholds[0]`` leaves level 1, and so on.

    The highest level is ``len(thresholds) + 1``.
    """

    def __init__(self, thresholds: Sequence[int]) -> None:
        if not thresholds:
            raise ValueError("thresholds must not be empty")
        if any(threshold < 1 for threshold in thresholds):
            raise ValueError("thresholds must all be positive")
        self.thresholds = tuple(thresholds)

    @property
    def max_level(self) -> int:
        return len(self.thresholds) + 1

    def xp_for_next_level(self, level: int) -> int | None:
        if level < 1:
            raise ValueError(f"level must be >= 1, got {level}")
        if level >= self.max_level:
            return None
        return self.thresholds[level - 1]

    def __repr__(self) -> str:
        return f"TableCurve(thresholds={list(self.thresholds)!r})"


def curve_from_settings(settings: ProgressionSettings) -> LevelingCurve:
    """Build the leveling curve selected in settings."""
    if settings.curve == "table":
        return TableCurve(settings.thresholds)
    return ExponentialCurve(
        base_xp=settings.base_xp,
        exponent=settings.exponent,
        max_level=settings.max_level,
    )


# =============================================================================
# Progression Tracker
# =============================================================================


class ProgressionTracker:
    """Reads, advances and persists player progression."""

    def __init__(self, store: CraftingStore, curve: LevelingCurve | None = None) -> None:
        self._store = store
        self.curve = curve or ExponentialCurve()

    def get(self, user_id: str) -> PlayerState | None:
        return self._store.load_player_state(user_id)

    def save(self, state: PlayerState) -> PlayerState:
        return self._store.save_player_state(
            state.user_id,
            level=state.level,
            xp=state.xp,
            total_xp=state.total_xp,
        )

    def apply_xp(self, state: PlayerState, gained: int) -> PlayerState:
        """Add XP and roll over as many levels as it pays for.

        Pure: the input state is untouched and nothing is persisted.

        Args:
            state: Current progression.
            gained: XP earned, at least zero.

        Returns:
            The advanced progression.

        Raises:
            ValueError: If ``gained`` is negative or the curve yields a
                non-positive threshold.
        """
        if gained < 0:
            raise ValueError(f"gained XP must be >= 0, got {gained}")

        level = state.level
        xp = state.xp + gained
        while True:
            needed = self.curve.xp_for_next_level(level)
            if needed is None or xp < needed:
                break
            if needed <= 0:
                raise ValueError(f"{self.curve!r} returned non-positive threshold for level {level}")
            xp -= needed
            level += 1

        if level > state.level:
            logger.debug("player_leveled_up", user_id=state.user_id, old=state.level, new=level)

        return state.model_copy(
            update={"level": level, "xp": xp, "total_xp": state.total_xp + gained}
        )

    def progress(self, state: PlayerState) -> XpProgress:
        """Progress through the current level."""
        return XpProgress(
            level=state.level,
            xp_in_level=state.xp,
            xp_needed=self.curve.xp_for_next_level(state.level),
        )
