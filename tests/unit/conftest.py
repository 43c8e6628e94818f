"""Pytest configuration and fixtures for unit tests."""

import pytest

from habitforge.core.events import EventBus
from habitforge.services.completion_ledger import CompletionLedger
from habitforge.services.progression_engine import ProgressionEngine
from habitforge.services.session_service import HabitSession


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def engine(bus) -> ProgressionEngine:
    """Engine subscribed to the shared bus."""
    engine = ProgressionEngine()
    engine.attach(bus)
    return engine


@pytest.fixture
def ledger(small_catalog, bus, engine) -> CompletionLedger:
    """Ledger publishing to the bus the engine listens on."""
    return CompletionLedger(small_catalog, bus, default_xp=10)


@pytest.fixture
def session(memory_store, small_catalog) -> HabitSession:
    """Session over the small catalog and an empty in-memory store."""
    return HabitSession(memory_store, catalog=small_catalog, default_xp=10)

