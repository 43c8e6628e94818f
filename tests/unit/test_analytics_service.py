"""Unit tests for analytics_service module."""

from datetime import UTC, datetime, timedelta

import pytest

from habitforge.domain.metrics import BioAgeGrade
from habitforge.domain.progression import UserProfile
from habitforge.services import analytics_service
from habitforge.services.session_service import HabitSession
from tests.unit.helpers import complete_day


@pytest.mark.unit
class TestWeeklyHistory:
    async def test_seven_days_oldest_first(self, session, day):
        """Verify seven days oldest first."""
        await session.complete_task("gratitude", day)
        await session.complete_task("gratitude", day - timedelta(days=2))
        await session.complete_task("sleep-early", day - timedelta(days=2))

        history = analytics_service.get_weekly_history(session.ledger, day)

        assert [entry.on_date for entry in history] == [day - timedelta(days=n) for n in range(6, -1, -1)]
        assert history[-1].completions == 1
        assert history[-3].completions == 2
        assert history[-3].percentage == pytest.approx(200 / 3)
        assert history[0].completions == 0
        await session.flush()

    def test_custom_window(self, session, day):
        """Verify custom window."""
        history = analytics_service.get_weekly_history(session.ledger, day, days=3)

        assert len(history) == 3
        assert history[-1].on_date == day


@pytest.mark.unit
class TestProgressSummary:
    async def test_summary_reflects_session_state(self, memory_store, small_catalog, day):
        """Verify summary reflects session state."""
        created = datetime(2025, 3, 1, tzinfo=UTC)
        session = HabitSession(memory_store, catalog=small_catalog, profile=UserProfile(created_at=created))
        await complete_day(session, day - timedelta(days=1))
        await complete_day(session, day)

        summary = analytics_service.build_progress_summary(
            session,
            today=day,
            now=datetime(2025, 3, 10, 12, tzinfo=UTC),
            chronological_age=40,
        )

        assert summary.total_xp == 110
        assert summary.level == 2
        assert summary.level_title == "Apprentice"
        assert summary.level_progress.xp_in_level == 10
        assert summary.current_streak == 2
        assert summary.longest_streak == 2
        assert summary.streak_freeze_count == 1
        assert summary.today_percentage == pytest.approx(100)
        assert summary.today_xp == 55
        # 110 XP over 9 whole days since 2025-03-01
        assert summary.xp_per_day == 12
        assert summary.years_saved == pytest.approx(0.011)
        assert summary.bio_age.chronological_age == 40
        assert summary.budget_monthly_cost == pytest.approx(400)
        assert len(summary.weekly_history) == analytics_service.HISTORY_DAYS
        assert summary.unlocked_achievements == ["first-task"]
        await session.flush()

    def test_fresh_session_summary(self, session, day):
        """Verify fresh session summary."""
        summary = analytics_service.build_progress_summary(session, today=day, chronological_age=35)

        assert summary.total_xp == 0
        assert summary.level == 1
        assert summary.today_percentage == 0
        assert summary.xp_per_day == 0
        assert summary.unlocked_achievements == []
        # Every sub-score at its worst end
        assert summary.bio_age.age_difference == pytest.approx(11)
        assert summary.bio_age.grade == BioAgeGrade.F

    async def test_xp_per_day_uses_at_least_one_day(self, session, day):
        """Verify a profile created today averages over a single day."""
        await session.complete_task("exercise-cardio", day)

        summary = analytics_service.build_progress_summary(session, today=day, now=session.profile.created_at)

        assert summary.xp_per_day == 25
        await session.flush()
