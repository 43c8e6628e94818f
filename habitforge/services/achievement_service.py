"""Achievement unlocking from completion, streak and level counters."""

from collections.abc import Iterable

from habitforge.catalog.achievements import ACHIEVEMENTS
from habitforge.domain.metrics import Achievement, AchievementKind


def is_unlocked(achievement: Achievement, *, total_completions: int, longest_streak: int, level: int) -> bool:
    counters = {
        AchievementKind.COMPLETIONS: total_completions,
        AchievementKind.LONGEST_STREAK: longest_streak,
        AchievementKind.LEVEL: level,
    }
    return counters[achievement.kind] >= achievement.requirement


def get_unlocked_achievements(
    *,
    total_completions: int,
    longest_streak: int,
    level: int,
    achievements: Iterable[Achievement] = ACHIEVEMENTS,
) -> list[str]:
    """Ids of every unlocked achievement, in catalog order.

    Streak achievements use the longest streak, so they stay unlocked after
    the current streak breaks.
    """
    return [
        achievement.id
        for achievement in achievements
        if is_unlocked(
            achievement,
            total_completions=total_completions,
            longest_streak=longest_streak,
            level=level,
        )
    ]
