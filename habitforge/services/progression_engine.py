"""Progression engine: XP, levels, streaks and streak-freeze inventory.

Streak transitions on a fully completed day:

    last_completed_date == today      -> unchanged (already credited)
    last_completed_date == today - 1  -> current_streak + 1
    last_completed_date is None       -> 1
    anything else (a gap)             -> 1

Freezes are an inventory only. A gap resets the streak even when freezes are
banked; consuming one is an explicit ``use_streak_freeze`` call.
"""

import bisect
import logging
from datetime import date, timedelta

from habitforge.catalog.protocol import LEVEL_THRESHOLDS, LEVEL_TITLES, MAX_LEVEL
from habitforge.core.config import Constants
from habitforge.core.events import EventBus
from habitforge.domain.events import DayCompleted, XPChanged
from habitforge.domain.progression import ProgressionState
from habitforge.models.service_models import LevelProgress, StreakUpdate


logger = logging.getLogger(__name__)


def level_for_xp(total_xp: int) -> int:
    """1-indexed level for a total XP value, clamped to [1, MAX_LEVEL]."""
    level = bisect.bisect_right(LEVEL_THRESHOLDS, total_xp)
    return min(max(level, 1), MAX_LEVEL)


def title_for_level(level: int) -> str:
    if level < 1 or not LEVEL_TITLES:
        return Constants.FALLBACK_LEVEL_TITLE
    return LEVEL_TITLES[min(level, len(LEVEL_TITLES)) - 1]


def level_progress_for_xp(total_xp: int) -> LevelProgress:
    """Where total_xp sits between its level's threshold and the next one.

    At max level the whole XP total counts as both current and needed, so
    progress reads 100%.
    """
    level = level_for_xp(total_xp)
    if level >= MAX_LEVEL:
        return LevelProgress(
            level=level,
            xp_in_level=total_xp,
            xp_needed=total_xp,
            progress_percent=100.0,
        )

    floor_xp = LEVEL_THRESHOLDS[level - 1]
    next_xp = LEVEL_THRESHOLDS[level]
    span_xp = next_xp - floor_xp
    xp_in_level = total_xp - floor_xp
    progress = xp_in_level / span_xp * 100 if span_xp > 0 else 0.0
    return LevelProgress(
        level=level,
        xp_in_level=xp_in_level,
        xp_needed=span_xp,
        progress_percent=progress,
    )


class ProgressionEngine:
    """Owns a ProgressionState and applies XP and streak transitions to it."""

    def __init__(self, state: ProgressionState | None = None) -> None:
        self._state = state if state is not None else ProgressionState()

    @property
    def state(self) -> ProgressionState:
        """A copy of the current state."""
        return self._state.model_copy()

    @property
    def total_xp(self) -> int:
        return self._state.total_xp

    @property
    def current_streak(self) -> int:
        return self._state.current_streak

    @property
    def longest_streak(self) -> int:
        return self._state.longest_streak

    @property
    def last_completed_date(self) -> date | None:
        return self._state.last_completed_date

    @property
    def streak_freeze_count(self) -> int:
        return self._state.streak_freeze_count

    def restore(self, state: ProgressionState) -> None:
        self._state = state.model_copy()

    def add_xp(self, delta: int) -> int:
        """Apply a signed XP change, clamping the total at zero.

        Returns:
            The new total
        """
        new_total = max(0, self._state.total_xp + delta)
        if self._state.total_xp + delta < 0:
            logger.debug("XP clamped at zero (delta=%d, total=%d)", delta, self._state.total_xp)
        self._state.total_xp = new_total
        return new_total

    def update_streak(self, today: date, completed_today: bool = True) -> StreakUpdate:
        """Advance or reset the streak for a fully completed day."""
        previous = self._state.current_streak
        last = self._state.last_completed_date

        if not completed_today or last == today:
            return StreakUpdate(
                changed=False,
                previous_streak=previous,
                current_streak=previous,
                longest_streak=self._state.longest_streak,
            )

        broken = False
        if last == today - timedelta(days=1):
            current = previous + 1
        elif last is None:
            current = 1
        else:
            current = 1
            broken = previous > 0
            logger.info(
                "Streak broken",
                extra={"previous_streak": previous, "last_completed": last.isoformat(), "today": today.isoformat()},
            )

        self._state.current_streak = current
        self._state.longest_streak = max(self._state.longest_streak, current)
        self._state.last_completed_date = today

        return StreakUpdate(
            changed=True,
            previous_streak=previous,
            current_streak=current,
            longest_streak=self._state.longest_streak,
            streak_broken=broken,
        )

    def get_level(self) -> int:
        return level_for_xp(self._state.total_xp)

    def get_level_title(self) -> str:
        return title_for_level(self.get_level())

    def get_level_progress(self) -> LevelProgress:
        return level_progress_for_xp(self._state.total_xp)

    def add_streak_freeze(self, count: int = 1) -> int:
        """Bank count freezes and return the new inventory.

        Raises:
            ValueError: If count is negative
        """
        if count < 0:
            msg = f"Streak freeze count must be non-negative, got {count}"
            raise ValueError(msg)
        self._state.streak_freeze_count += count
        return self._state.streak_freeze_count

    def use_streak_freeze(self) -> bool:
        """Consume one freeze. Returns False when none are banked."""
        if self._state.streak_freeze_count == 0:
            return False
        self._state.streak_freeze_count -= 1
        return True

    def on_xp_changed(self, event: XPChanged) -> None:
        self.add_xp(event.delta)

    def on_day_completed(self, event: DayCompleted) -> None:
        update = self.update_streak(event.on_date, completed_today=True)
        if update.changed:
            logger.info(
                "Streak updated",
                extra={"current_streak": update.current_streak, "longest_streak": update.longest_streak},
            )

    def attach(self, bus: EventBus) -> None:
        """Subscribe this engine's handlers to ledger events on bus."""
        bus.subscribe(XPChanged, self.on_xp_changed)
        bus.subscribe(DayCompleted, self.on_day_completed)

    def detach(self, bus: EventBus) -> None:
        bus.unsubscribe(XPChanged, self.on_xp_changed)
        bus.unsubscribe(DayCompleted, self.on_day_completed)
