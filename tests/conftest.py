"""Pytest configuration and shared fixtures."""

import os


# Settings are read at import time; keep tests off the on-disk SQLite default
os.environ.setdefault("STORAGE_BACKEND", "memory")

from datetime import date  # noqa: E402

import logfire  # noqa: E402
import pytest  # noqa: E402

from habitforge.catalog.protocol import TaskCatalog  # noqa: E402
from habitforge.core.kv_store import InMemoryKVStore  # noqa: E402
from habitforge.domain.task import Task, TaskCategory  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def logfire_offline():
    """Configure Logfire once so spans run locally without exporting."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def day() -> date:
    """A fixed Monday used as "today" throughout the tests."""
    return date(2025, 3, 10)


@pytest.fixture
def memory_store() -> InMemoryKVStore:
    """Provides a fresh in-memory key-value store."""
    return InMemoryKVStore()


@pytest.fixture
def small_catalog() -> TaskCatalog:
    """Three-task catalog so a full day is easy to complete."""
    return TaskCatalog(
        [
            Task(id="exercise-cardio", title="Cardio", xp=25, category=TaskCategory.EXERCISE),
            Task(id="sleep-early", title="Sleep early", xp=20, category=TaskCategory.EVENING),
            Task(id="gratitude", title="Gratitude", xp=10, category=TaskCategory.MINDSET),
        ]
    )
