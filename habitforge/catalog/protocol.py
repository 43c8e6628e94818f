"""Daily protocol task catalog and level tables."""

from collections.abc import Iterator

from habitforge.domain.task import Task, TaskCategory


PROTOCOL_TASKS: tuple[Task, ...] = (
    Task(
        id="wake-early",
        title="Wake by 5:30 AM",
        description="Start your day early for optimal productivity",
        xp=15,
        category=TaskCategory.MORNING,
    ),
    Task(
        id="morning-light",
        title="Morning Light Exposure",
        description="10+ minutes of natural light within 30 min of waking",
        xp=10,
        category=TaskCategory.MORNING,
    ),
    Task(
        id="super-veggie",
        title="Super Veggie Meal",
        description="Eat your nutrient-dense veggie blend",
        xp=20,
        category=TaskCategory.NUTRITION,
    ),
    Task(
        id="nutty-pudding",
        title="Nutty Pudding",
        description="Have your protein-rich nut pudding",
        xp=15,
        category=TaskCategory.NUTRITION,
    ),
    Task(
        id="supplements-am",
        title="Morning Supplements",
        description="Take your morning supplement stack",
        xp=10,
        category=TaskCategory.NUTRITION,
    ),
    Task(
        id="hydration",
        title="Hydration Goal",
        description="Drink 2+ liters of water throughout the day",
        xp=10,
        category=TaskCategory.NUTRITION,
    ),
    Task(
        id="exercise-cardio",
        title="Cardio Exercise",
        description="30+ minutes of cardiovascular exercise",
        xp=25,
        category=TaskCategory.EXERCISE,
    ),
    Task(
        id="exercise-strength",
        title="Strength Training",
        description="Complete your strength training routine",
        xp=25,
        category=TaskCategory.EXERCISE,
    ),
    Task(
        id="no-eating-after",
        title="Stop Eating by 11 AM",
        description="Practice time-restricted eating",
        xp=15,
        category=TaskCategory.NUTRITION,
    ),
    Task(
        id="supplements-pm",
        title="Evening Supplements",
        description="Take your evening supplement stack",
        xp=10,
        category=TaskCategory.EVENING,
    ),
    Task(
        id="wind-down",
        title="Wind Down Routine",
        description="Begin relaxation 2 hours before bed",
        xp=15,
        category=TaskCategory.EVENING,
    ),
    Task(
        id="sleep-early",
        title="Sleep by 8:30 PM",
        description="Get to bed early for optimal recovery",
        xp=20,
        category=TaskCategory.EVENING,
    ),
    Task(
        id="gratitude",
        title="Gratitude Practice",
        description="Write down 3 things you are grateful for",
        xp=10,
        category=TaskCategory.MINDSET,
    ),
)

# XP needed to reach level i+1; must stay ascending
LEVEL_THRESHOLDS: tuple[int, ...] = (0, 100, 300, 600, 1000, 1500, 2200, 3000, 4000, 5500, 7500)

LEVEL_TITLES: tuple[str, ...] = (
    "Novice",
    "Apprentice",
    "Initiate",
    "Student",
    "Practitioner",
    "Adept",
    "Expert",
    "Master",
    "Sage",
    "Legend",
    "Immortal",
)

MAX_LEVEL = len(LEVEL_THRESHOLDS)


class TaskCatalog:
    """Ordered, read-only collection of protocol tasks."""

    def __init__(self, tasks: tuple[Task, ...] | list[Task] = PROTOCOL_TASKS) -> None:
        """Build the catalog.

        Raises:
            ValueError: If two tasks share an id
        """
        self._tasks = tuple(tasks)
        self._by_id = {task.id: task for task in self._tasks}
        if len(self._by_id) != len(self._tasks):
            msg = "Task catalog contains duplicate task ids"
            raise ValueError(msg)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._by_id

    @property
    def task_ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    def get(self, task_id: str) -> Task | None:
        return self._by_id.get(task_id)


default_catalog = TaskCatalog()
