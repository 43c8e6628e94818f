"""Helpers shared by unit tests."""

from datetime import date

from habitforge.core.kv_store import InMemoryKVStore, StorageError
from habitforge.services.session_service import HabitSession


async def complete_day(session: HabitSession, on_date: date) -> None:
    """Complete every catalog task on on_date."""
    for task in session.catalog:
        await session.complete_task(task.id, on_date)


class FailingKVStore(InMemoryKVStore):
    """In-memory store whose reads and/or writes raise StorageError."""

    def __init__(self, *, fail_reads: bool = False, fail_writes: bool = False) -> None:
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.closed = False

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageError(f"Failed to read {key}: storage offline")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError(f"Failed to write {key}: storage offline")
        await super().set(key, value)

    async def delete(self, *keys: str) -> None:
        if self.fail_writes:
            raise StorageError("Failed to delete: storage offline")
        await super().delete(*keys)

    async def close(self) -> None:
        self.closed = True
