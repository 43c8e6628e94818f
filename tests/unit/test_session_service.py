"""Unit tests for session_service module."""

import json
from datetime import UTC, datetime, timedelta

import pytest

from habitforge.core.config import Constants
from habitforge.domain.completion import CompletionRecord, LedgerSnapshot
from habitforge.domain.progression import ProgressionState, UserProfile, UserSnapshot
from habitforge.services.session_service import HabitSession
from tests.unit.helpers import FailingKVStore, complete_day


@pytest.mark.unit
class TestLoad:
    """Tests for restoring a session from storage."""

    async def test_empty_store_gives_defaults(self, memory_store, small_catalog):
        """Verify empty store gives defaults."""
        session = await HabitSession.load(memory_store, catalog=small_catalog)

        assert session.engine.total_xp == 0
        assert session.engine.current_streak == 0
        assert session.engine.streak_freeze_count == 1
        assert len(session.ledger) == 0
        assert session.profile.is_premium is False

    async def test_restores_both_namespaces(self, memory_store, small_catalog, day):
        """Verify restores both namespaces."""
        ledger = LedgerSnapshot(completions=[CompletionRecord(task_id="gratitude", date=day, xp_awarded=10)])
        user = UserSnapshot(
            progression=ProgressionState(total_xp=310, current_streak=3, longest_streak=5, last_completed_date=day),
            profile=UserProfile(is_premium=True),
        )
        await memory_store.set(Constants.TASK_STORAGE_KEY, ledger.model_dump_json())
        await memory_store.set(Constants.USER_STORAGE_KEY, user.model_dump_json())

        session = await HabitSession.load(memory_store, catalog=small_catalog)

        assert session.is_completed("gratitude", day)
        assert session.engine.total_xp == 310
        assert session.get_level() == 3
        assert session.engine.longest_streak == 5
        assert session.profile.is_premium is True

    async def test_restore_does_not_replay_xp(self, memory_store, small_catalog, day):
        """Verify restore does not replay xp."""
        ledger = LedgerSnapshot(completions=[CompletionRecord(task_id="gratitude", date=day, xp_awarded=10)])
        await memory_store.set(Constants.TASK_STORAGE_KEY, ledger.model_dump_json())

        session = await HabitSession.load(memory_store, catalog=small_catalog)

        assert session.engine.total_xp == 0

    async def test_corrupt_json_falls_back_to_defaults(self, memory_store, small_catalog, caplog):
        """Verify corrupt json falls back to defaults."""
        await memory_store.set(Constants.USER_STORAGE_KEY, "{not json")
        await memory_store.set(Constants.TASK_STORAGE_KEY, json.dumps({"completions": [{"task_id": ""}]}))

        session = await HabitSession.load(memory_store, catalog=small_catalog)

        assert session.engine.total_xp == 0
        assert session.engine.streak_freeze_count == 1
        assert len(session.ledger) == 0
        assert "Discarding invalid" in caplog.text

    async def test_inconsistent_streaks_fall_back_to_defaults(self, memory_store, small_catalog):
        """Verify inconsistent streaks fall back to defaults."""
        payload = {"progression": {"current_streak": 4, "longest_streak": 1}}
        await memory_store.set(Constants.USER_STORAGE_KEY, json.dumps(payload))

        session = await HabitSession.load(memory_store, catalog=small_catalog)

        assert session.engine.current_streak == 0

    async def test_unreadable_store_falls_back_to_defaults(self, small_catalog):
        """Verify unreadable store falls back to defaults."""
        store = FailingKVStore(fail_reads=True)

        session = await HabitSession.load(store, catalog=small_catalog)

        assert session.engine.total_xp == 0
        assert len(session.ledger) == 0


@pytest.mark.unit
class TestCompletions:
    """Tests for completing and undoing through the session."""

    async def test_complete_task(self, session, day):
        """Verify complete task."""
        result = await session.complete_task("exercise-cardio", day)

        assert result.applied is True
        assert result.xp_delta == 25
        assert result.total_xp == 25
        assert result.record == CompletionRecord(task_id="exercise-cardio", date=day, xp_awarded=25)
        assert session.total_xp_for_date(day) == 25
        await session.flush()

    async def test_double_complete_is_idempotent(self, session, day):
        """Verify double complete is idempotent."""
        await session.complete_task("gratitude", day)

        result = await session.complete_task("gratitude", day)

        assert result.applied is False
        assert result.xp_delta == 0
        assert session.engine.total_xp == 10
        assert len(session.ledger) == 1
        await session.flush()

    async def test_full_day_reports_day_completed(self, session, day):
        """Verify full day reports day completed."""
        await session.complete_task("exercise-cardio", day)
        await session.complete_task("sleep-early", day)

        result = await session.complete_task("gratitude", day)

        assert result.day_completed is True
        assert result.current_streak == 1
        assert session.completion_percentage(day) == pytest.approx(100)
        await session.flush()

    async def test_streak_across_days(self, session, day):
        """Verify streak across days."""
        await complete_day(session, day)
        await complete_day(session, day + timedelta(days=1))
        assert session.engine.current_streak == 2

        await complete_day(session, day + timedelta(days=3))
        assert session.engine.current_streak == 1
        assert session.engine.longest_streak == 2
        await session.flush()

    async def test_level_up_reported(self, memory_store, small_catalog, day):
        """Verify level up reported."""
        session = HabitSession(memory_store, catalog=small_catalog, progression=ProgressionState(total_xp=90))

        result = await session.complete_task("gratitude", day)

        assert result.leveled_up is True
        assert result.level == 2
        await session.flush()

    async def test_undo_round_trip_keeps_streak(self, session, day):
        """Verify undo round trip keeps streak."""
        await complete_day(session, day)
        xp_after_day = session.engine.total_xp

        await session.complete_task("gratitude", day + timedelta(days=1))
        result = await session.undo_task("gratitude", day + timedelta(days=1))
        assert result.xp_delta == -10
        assert session.engine.total_xp == xp_after_day

        await session.undo_task("gratitude", day)
        assert session.engine.total_xp == xp_after_day - 10
        assert session.engine.current_streak == 1
        await session.flush()

    async def test_undo_missing_is_noop(self, session, day):
        """Verify undo missing is noop."""
        result = await session.undo_task("gratitude", day)

        assert result.applied is False
        assert session.pending_saves == 0

    async def test_today_defaults_to_utc_date(self, session):
        """Verify today defaults to utc date."""
        await session.complete_task("gratitude")

        assert session.is_completed("gratitude", datetime.now(UTC).date())
        await session.flush()


@pytest.mark.unit
class TestPersistence:
    """Tests for fire-and-forget snapshot writes."""

    async def test_mutation_is_saved_after_flush(self, session, memory_store, day):
        """Verify mutation is saved after flush."""
        await session.complete_task("gratitude", day)
        await session.flush()

        ledger = LedgerSnapshot.model_validate_json(await memory_store.get(Constants.TASK_STORAGE_KEY))
        user = UserSnapshot.model_validate_json(await memory_store.get(Constants.USER_STORAGE_KEY))
        assert [record.task_id for record in ledger.completions] == ["gratitude"]
        assert user.progression.total_xp == 10

    async def test_last_write_reflects_latest_state(self, session, memory_store, day):
        """Verify last write reflects latest state."""
        await session.complete_task("exercise-cardio", day)
        await session.complete_task("sleep-early", day)
        await session.complete_task("gratitude", day)
        await session.undo_task("sleep-early", day)
        await session.flush()

        ledger = LedgerSnapshot.model_validate_json(await memory_store.get(Constants.TASK_STORAGE_KEY))
        user = UserSnapshot.model_validate_json(await memory_store.get(Constants.USER_STORAGE_KEY))
        assert {record.task_id for record in ledger.completions} == {"exercise-cardio", "gratitude"}
        assert user.progression.total_xp == 35
        assert user.progression.current_streak == 1

    async def test_round_trip_through_store(self, session, memory_store, small_catalog, day):
        """Verify round trip through store."""
        await complete_day(session, day)
        await session.use_streak_freeze()
        await session.set_premium(True)
        await session.unlock_budget_access()
        await session.flush()

        reloaded = await HabitSession.load(memory_store, catalog=small_catalog)

        assert reloaded.progression == session.progression
        assert reloaded.ledger.records == session.ledger.records
        assert reloaded.profile == session.profile
        assert reloaded.profile.has_budget_access is True

    async def test_failed_save_is_not_fatal(self, small_catalog, day, caplog):
        """Verify failed save is not fatal."""
        store = FailingKVStore(fail_writes=True)
        session = HabitSession(store, catalog=small_catalog)

        result = await session.complete_task("gratitude", day)
        await session.flush()

        assert result.applied is True
        assert session.engine.total_xp == 10
        assert "Failed to save habit snapshot" in caplog.text

    async def test_close_flushes_then_closes(self, small_catalog, day):
        """Verify close flushes then closes."""
        store = FailingKVStore()
        session = HabitSession(store, catalog=small_catalog)
        await session.complete_task("gratitude", day)

        await session.close()

        assert store.closed is True
        assert await store.get(Constants.TASK_STORAGE_KEY) is not None


@pytest.mark.unit
class TestResetAndFreezes:
    async def test_reset_clears_storage_and_state(self, session, memory_store, day):
        """Verify reset clears storage and state."""
        await complete_day(session, day)
        await session.add_streak_freeze(3)
        await session.set_premium(True)
        await session.flush()
        reset_at = datetime(2025, 4, 1, tzinfo=UTC)

        await session.reset(now=reset_at)

        assert await memory_store.get(Constants.TASK_STORAGE_KEY) is None
        assert await memory_store.get(Constants.USER_STORAGE_KEY) is None
        assert session.engine.total_xp == 0
        assert session.engine.current_streak == 0
        assert session.engine.longest_streak == 0
        assert session.engine.last_completed_date is None
        assert session.engine.streak_freeze_count == 1
        assert session.profile == UserProfile(created_at=reset_at)
        assert len(session.ledger) == 0

    async def test_reset_tolerates_storage_failure(self, small_catalog, day):
        """Verify reset tolerates storage failure."""
        store = FailingKVStore(fail_writes=True)
        session = HabitSession(store, catalog=small_catalog)
        await session.complete_task("gratitude", day)

        await session.reset()

        assert session.engine.total_xp == 0

    async def test_freeze_inventory(self, session):
        """Verify freeze inventory."""
        assert await session.add_streak_freeze(2) == 3
        assert await session.use_streak_freeze() is True
        assert session.engine.streak_freeze_count == 2
        await session.flush()

    async def test_use_freeze_when_empty(self, memory_store, small_catalog):
        """Verify use freeze when empty."""
        session = HabitSession(memory_store, catalog=small_catalog, progression=ProgressionState())

        assert await session.use_streak_freeze() is False
        assert session.pending_saves == 0
