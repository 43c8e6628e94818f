"""Analytics service for progress overviews.

This module provides functions for:
- Building the 7-day completion history shown in weekly charts
- Bundling every progress figure (level, streaks, bio-age, budget) into one
  ProgressSummary so consumers read a consistent snapshot

Key Concepts:
- Weekly history: one DailyCompletion per day, oldest first, ending today.
  Days without completions are included with zero counts.
- Progress summary: computed from the session's live state on every call.
  Nothing is cached.
"""

import logging
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from habitforge.core.config import settings
from habitforge.core.logging import span
from habitforge.core.numbers import round_half_up
from habitforge.domain.metrics import AlcoholFrequency, CostTier, SmokingStatus
from habitforge.models.service_models import BioAgeInput, DailyCompletion, ProgressSummary
from habitforge.services import achievement_service, bio_age_service, cost_tier_service
from habitforge.services.completion_ledger import CompletionLedger


if TYPE_CHECKING:
    from habitforge.services.session_service import HabitSession


logger = logging.getLogger(__name__)

HISTORY_DAYS = 7


def get_weekly_history(ledger: CompletionLedger, today: date, *, days: int = HISTORY_DAYS) -> list[DailyCompletion]:
    """Get per-day completion counts for the window ending on today.

    Args:
        ledger: Ledger to read from
        today: Last day of the window (inclusive)
        days: Window length (default: 7)

    Returns:
        List of DailyCompletion objects, oldest first
    """
    history = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        history.append(
            DailyCompletion(
                on_date=day,
                completions=len(ledger.completions_for_date(day)),
                percentage=ledger.completion_percentage(day),
            )
        )
    return history


def build_progress_summary(
    session: "HabitSession",
    *,
    today: date | None = None,
    now: datetime | None = None,
    chronological_age: float | None = None,
    smoking_status: SmokingStatus = SmokingStatus.NEVER,
    alcohol_frequency: AlcoholFrequency = AlcoholFrequency.OCCASIONAL,
) -> ProgressSummary:
    """Compute every progress figure from the session's current state.

    Args:
        session: Loaded habit session
        today: Calendar day to report on (default: current UTC date)
        now: Wall-clock time used for days-since-start (default: current UTC time)
        chronological_age: Age for bio-age (default: settings.default_chronological_age)
        smoking_status: Lifestyle input for bio-age
        alcohol_frequency: Lifestyle input for bio-age

    Returns:
        ProgressSummary
    """
    with span("analytics_service.build_progress_summary"):
        now = now or datetime.now(UTC)
        today = today or now.date()
        age = chronological_age if chronological_age is not None else settings.default_chronological_age

        engine = session.engine
        ledger = session.ledger

        elapsed_days = bio_age_service.days_since_start(session.profile.created_at, now)
        factors = bio_age_service.calculate_factors_from_completions(
            ledger.records,
            current_streak=engine.current_streak,
            days_since_start=elapsed_days,
            today=today,
            catalog_size=len(session.catalog),
        )
        bio_age = bio_age_service.calculate_bio_age(
            BioAgeInput(
                **factors.model_dump(),
                chronological_age=age,
                smoking_status=smoking_status,
                alcohol_frequency=alcohol_frequency,
            )
        )

        level = engine.get_level()
        budget_monthly_cost = cost_tier_service.calculate_monthly_protocol_cost().for_tier(CostTier.BUDGET)

        summary = ProgressSummary(
            total_xp=engine.total_xp,
            level=level,
            level_title=engine.get_level_title(),
            level_progress=engine.get_level_progress(),
            current_streak=engine.current_streak,
            longest_streak=engine.longest_streak,
            streak_freeze_count=engine.streak_freeze_count,
            today_percentage=ledger.completion_percentage(today),
            today_xp=ledger.total_xp_for_date(today),
            xp_per_day=round_half_up(engine.total_xp / elapsed_days),
            years_saved=bio_age_service.xp_to_years_saved(engine.total_xp),
            bio_age=bio_age,
            budget_monthly_cost=budget_monthly_cost,
            weekly_history=get_weekly_history(ledger, today, days=HISTORY_DAYS),
            unlocked_achievements=achievement_service.get_unlocked_achievements(
                total_completions=len(ledger),
                longest_streak=engine.longest_streak,
                level=level,
            ),
        )
        logger.debug("Built progress summary", extra={"level": level, "total_xp": engine.total_xp})
        return summary
