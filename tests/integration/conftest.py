"""Pytest configuration and fixtures for integration tests."""

from pathlib import Path

import pytest

from habitforge.core.kv_store import SQLiteKVStore


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Path to a fresh SQLite file inside the test's temp directory."""
    return tmp_path / "data" / "habitforge.db"


@pytest.fixture
async def sqlite_store(db_path):
    """SQLite-backed store, closed after the test."""
    store = SQLiteKVStore(db_path)
    yield store
    await store.close()
