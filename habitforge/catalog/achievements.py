"""Achievement definitions."""

from habitforge.domain.metrics import Achievement, AchievementKind


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement(
        id="first-task",
        title="First Steps",
        description="Complete your first task",
        kind=AchievementKind.COMPLETIONS,
        requirement=1,
    ),
    Achievement(
        id="week-streak",
        title="Week One",
        description="7-day streak",
        kind=AchievementKind.LONGEST_STREAK,
        requirement=7,
    ),
    Achievement(
        id="month-streak",
        title="Month",
        description="30-day streak",
        kind=AchievementKind.LONGEST_STREAK,
        requirement=30,
    ),
    Achievement(
        id="hundred-tasks",
        title="Century",
        description="100 tasks completed",
        kind=AchievementKind.COMPLETIONS,
        requirement=100,
    ),
    Achievement(
        id="level-5",
        title="Adept",
        description="Reach level 5",
        kind=AchievementKind.LEVEL,
        requirement=5,
    ),
    Achievement(
        id="level-10",
        title="Legend",
        description="Reach level 10",
        kind=AchievementKind.LEVEL,
        requirement=10,
    ),
)
