"""Habit session: owns the ledger, the progression engine and their persistence.

A HabitSession is the single entry point for consumers. It wires the
CompletionLedger to the ProgressionEngine through an EventBus, restores both
from a KVStore on ``load`` and snapshots them back after every mutation.

Persistence contract:
- Every mutating call finishes its in-memory changes before its first await,
  then schedules a snapshot write as a background task.
- Writes are serialized and always serialize the state current at write time,
  so the last write reflects the latest mutation.
- A failed or unreadable load starts from defaults; a failed write is logged
  and the in-memory state stays authoritative.
"""

import asyncio
import logging
from datetime import UTC, date, datetime
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from habitforge.catalog.protocol import TaskCatalog, default_catalog
from habitforge.core.config import Constants, settings
from habitforge.core.events import EventBus
from habitforge.core.kv_store import KVStore, StorageError
from habitforge.core.logging import log_with_context, span
from habitforge.domain.completion import CompletionRecord, LedgerSnapshot
from habitforge.domain.progression import ProgressionState, UserProfile, UserSnapshot
from habitforge.models.service_models import CompletionResult, LevelProgress
from habitforge.services.completion_ledger import CompletionLedger
from habitforge.services.progression_engine import ProgressionEngine


logger = logging.getLogger(__name__)

SnapshotT = TypeVar("SnapshotT", bound=BaseModel)


def utc_today() -> date:
    return datetime.now(UTC).date()


def default_progression() -> ProgressionState:
    return ProgressionState(streak_freeze_count=settings.initial_streak_freezes)


async def _read_snapshot(store: KVStore, key: str, model: type[SnapshotT]) -> SnapshotT | None:
    """Read and validate one namespace, returning None when it cannot be used."""
    try:
        raw = await store.get(key)
    except StorageError as e:
        logger.warning("Failed to read %s, starting from defaults: %s", key, e)
        return None

    if raw is None:
        return None

    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Discarding invalid %s snapshot: %s", key, e)
        return None


class HabitSession:
    """Explicit state object replacing process-wide stores."""

    def __init__(
        self,
        store: KVStore,
        *,
        catalog: TaskCatalog | None = None,
        progression: ProgressionState | None = None,
        profile: UserProfile | None = None,
        completions: list[CompletionRecord] | None = None,
        default_xp: int | None = None,
    ) -> None:
        self.store = store
        self.catalog = catalog if catalog is not None else default_catalog
        self.bus = EventBus()
        self.engine = ProgressionEngine(progression if progression is not None else default_progression())
        self.engine.attach(self.bus)
        self.ledger = CompletionLedger(self.catalog, self.bus, default_xp=default_xp, records=completions or ())
        self.profile = profile if profile is not None else UserProfile()
        self._pending_saves: set[asyncio.Task[None]] = set()
        self._save_lock = asyncio.Lock()

    @classmethod
    async def load(
        cls,
        store: KVStore,
        *,
        catalog: TaskCatalog | None = None,
        default_xp: int | None = None,
    ) -> "HabitSession":
        """Restore a session from both storage namespaces.

        Missing, unreadable or invalid namespaces fall back to defaults
        independently of each other.

        Args:
            store: Key-value backend holding the snapshots
            catalog: Task catalog (default: the protocol catalog)
            default_xp: XP for unknown task ids (default: settings.default_task_xp)

        Returns:
            A ready-to-use HabitSession
        """
        with span("session_service.load"):
            ledger_snapshot = await _read_snapshot(store, Constants.TASK_STORAGE_KEY, LedgerSnapshot)
            user_snapshot = await _read_snapshot(store, Constants.USER_STORAGE_KEY, UserSnapshot)

            session = cls(
                store,
                catalog=catalog,
                progression=user_snapshot.progression if user_snapshot else None,
                profile=user_snapshot.profile if user_snapshot else None,
                completions=ledger_snapshot.completions if ledger_snapshot else None,
                default_xp=default_xp,
            )
            log_with_context(
                logger,
                "info",
                "Loaded habit session",
                completions=len(session.ledger),
                total_xp=session.engine.total_xp,
                restored_user=user_snapshot is not None,
            )
            return session

    # Persistence

    def user_snapshot(self) -> UserSnapshot:
        return UserSnapshot(progression=self.engine.state, profile=self.profile.model_copy())

    async def _save(self) -> None:
        async with self._save_lock:
            ledger_json = self.ledger.to_snapshot().model_dump_json()
            user_json = self.user_snapshot().model_dump_json()
            try:
                await self.store.set(Constants.TASK_STORAGE_KEY, ledger_json)
                await self.store.set(Constants.USER_STORAGE_KEY, user_json)
            except StorageError as e:
                logger.warning("Failed to save habit snapshot, keeping in-memory state: %s", e)

    def _schedule_save(self) -> None:
        task = asyncio.get_running_loop().create_task(self._save())
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    @property
    def pending_saves(self) -> int:
        return len(self._pending_saves)

    async def flush(self) -> None:
        """Wait for every scheduled snapshot write to finish."""
        while self._pending_saves:
            await asyncio.gather(*list(self._pending_saves))

    async def close(self) -> None:
        await self.flush()
        await self.store.close()

    async def reset(self, *, now: datetime | None = None) -> None:
        """Clear both namespaces and return every counter to its default."""
        with span("session_service.reset"):
            await self.flush()
            self.ledger.clear()
            self.engine.restore(default_progression())
            self.profile = UserProfile(created_at=now or datetime.now(UTC))
            try:
                await self.store.delete(Constants.TASK_STORAGE_KEY, Constants.USER_STORAGE_KEY)
            except StorageError as e:
                logger.warning("Failed to clear stored snapshots: %s", e)
            logger.info("Reset habit session")

    # Completions

    def _result(
        self,
        task_id: str,
        on_date: date,
        record: CompletionRecord | None,
        *,
        xp_delta: int,
        level_before: int,
        day_completed: bool = False,
    ) -> CompletionResult:
        level = self.engine.get_level()
        return CompletionResult(
            task_id=task_id,
            on_date=on_date,
            applied=record is not None,
            record=record,
            xp_delta=xp_delta,
            total_xp=self.engine.total_xp,
            level=level,
            leveled_up=level > level_before,
            day_completed=day_completed,
            current_streak=self.engine.current_streak,
            longest_streak=self.engine.longest_streak,
        )

    async def complete_task(self, task_id: str, today: date | None = None) -> CompletionResult:
        """Mark task_id done for today. Completing twice the same day is a no-op."""
        today = today or utc_today()
        with span("session_service.complete_task"):
            level_before = self.engine.get_level()
            record = self.ledger.record_completion(task_id, today)
            if record is None:
                return self._result(task_id, today, None, xp_delta=0, level_before=level_before)

            self._schedule_save()
            return self._result(
                task_id,
                today,
                record,
                xp_delta=record.xp_awarded,
                level_before=level_before,
                day_completed=self.ledger.is_day_complete(today),
            )

    async def undo_task(self, task_id: str, today: date | None = None) -> CompletionResult:
        """Remove today's completion of task_id. Streak credit is kept."""
        today = today or utc_today()
        with span("session_service.undo_task"):
            level_before = self.engine.get_level()
            xp_before = self.engine.total_xp
            record = self.ledger.undo_completion(task_id, today)
            if record is not None:
                self._schedule_save()
            return self._result(
                task_id,
                today,
                record,
                xp_delta=self.engine.total_xp - xp_before,
                level_before=level_before,
            )

    def is_completed(self, task_id: str, on_date: date | None = None) -> bool:
        return self.ledger.is_completed(task_id, on_date or utc_today())

    def completion_percentage(self, on_date: date | None = None) -> float:
        return self.ledger.completion_percentage(on_date or utc_today())

    def total_xp_for_date(self, on_date: date | None = None) -> int:
        return self.ledger.total_xp_for_date(on_date or utc_today())

    # Progression

    @property
    def progression(self) -> ProgressionState:
        return self.engine.state

    def get_level(self) -> int:
        return self.engine.get_level()

    def get_level_title(self) -> str:
        return self.engine.get_level_title()

    def get_level_progress(self) -> LevelProgress:
        return self.engine.get_level_progress()

    async def add_streak_freeze(self, count: int = 1) -> int:
        total = self.engine.add_streak_freeze(count)
        self._schedule_save()
        return total

    async def use_streak_freeze(self) -> bool:
        used = self.engine.use_streak_freeze()
        if used:
            self._schedule_save()
        return used

    # Profile

    async def set_premium(self, value: bool) -> None:
        self.profile = self.profile.model_copy(update={"is_premium": value})
        self._schedule_save()

    async def unlock_budget_access(self) -> None:
        self.profile = self.profile.model_copy(update={"has_budget_access": True})
        self._schedule_save()
