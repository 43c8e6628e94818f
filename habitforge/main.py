"""habitforge - daily protocol tracker with XP, levels, streaks and health metrics.

Command-line consumer of HabitSession. Every command loads the session from
the configured key-value store, runs, flushes pending snapshot writes and
closes the store.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from datetime import UTC, date, datetime, time

from habitforge.catalog.healthcare import LONGEVITY_FACTS
from habitforge.catalog.supplements import TIER_LABELS
from habitforge.core.config import settings
from habitforge.core.errors import classify_error_with_response
from habitforge.core.kv_store import create_kv_store
from habitforge.core.logging import configure_logfire
from habitforge.domain.metrics import AlcoholFrequency, CostTier, SmokingStatus
from habitforge.models.service_models import BioAgeInput
from habitforge.services import (
    analytics_service,
    bio_age_service,
    cost_tier_service,
    healthcare_roi_service,
)
from habitforge.services.session_service import HabitSession, utc_today


logger = logging.getLogger(__name__)


def _emit(line: str = "") -> None:
    print(line)  # noqa: T201


def _parse_date(value: str | None) -> date:
    """Parse a YYYY-MM-DD argument, defaulting to today (UTC)."""
    if value is None:
        return utc_today()
    return date.fromisoformat(value)


def _positive_age(value: str) -> float:
    """argparse type for --age: a number greater than zero."""
    try:
        age = float(value)
    except ValueError:
        msg = f"invalid age: {value!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if age <= 0:
        msg = f"age must be greater than 0, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return age


def _age(value: float | None) -> float:
    return value if value is not None else settings.default_chronological_age


async def cmd_tasks(session: HabitSession, args: argparse.Namespace) -> int:
    on_date = _parse_date(args.date)
    _emit(f"Protocol for {on_date.isoformat()} ({session.completion_percentage(on_date):.0f}% done)")
    for task in session.catalog:
        mark = "x" if session.is_completed(task.id, on_date) else " "
        _emit(f"  [{mark}] {task.id:<18} {task.title} (+{task.xp} XP, {task.category})")
    return 0


def _completion_date_error(session: HabitSession, on_date: date) -> str | None:
    """Reason on_date cannot be completed, or None.

    Streaks only move forward: a full day before the last completed day would
    count as a gap and restart the streak.
    """
    if on_date > utc_today():
        return f"Cannot complete tasks for {on_date.isoformat()}: that day has not started yet."
    last = session.engine.last_completed_date
    if last is not None and on_date < last:
        return (
            f"Cannot complete tasks for {on_date.isoformat()}: "
            f"progress is already recorded through {last.isoformat()}."
        )
    return None


async def cmd_complete(session: HabitSession, args: argparse.Namespace) -> int:
    on_date = _parse_date(args.date)
    error = _completion_date_error(session, on_date)
    if error is not None:
        _emit(error)
        return 1

    result = await session.complete_task(args.task_id, on_date)
    if not result.applied:
        _emit(f"{args.task_id} is already completed on {on_date.isoformat()}.")
        return 0

    _emit(f"Completed {args.task_id} (+{result.xp_delta} XP). Total XP: {result.total_xp}")
    if result.leveled_up:
        _emit(f"Level up! You are now level {result.level} ({session.get_level_title()}).")
    if result.day_completed:
        _emit(f"Every task done for {on_date.isoformat()}. Streak: {result.current_streak} day(s).")
    return 0


async def cmd_undo(session: HabitSession, args: argparse.Namespace) -> int:
    on_date = _parse_date(args.date)
    result = await session.undo_task(args.task_id, on_date)
    if not result.applied:
        _emit(f"{args.task_id} was not completed on {on_date.isoformat()}.")
        return 0
    _emit(f"Undid {args.task_id} ({result.xp_delta} XP). Total XP: {result.total_xp}")
    return 0


async def cmd_status(session: HabitSession, args: argparse.Namespace) -> int:
    if args.storage:
        health = session.store.get_health_status()
        _emit(f"Storage backend: {health['backend']}")
        for key, value in health.items():
            if key != "backend":
                _emit(f"  {key}: {value}")
        return 0

    summary = analytics_service.build_progress_summary(
        session,
        today=_parse_date(args.date),
        chronological_age=_age(args.age),
    )
    if args.json:
        _emit(summary.model_dump_json(indent=2))
        return 0

    progress = summary.level_progress
    _emit(f"Level {summary.level} - {summary.level_title} ({progress.progress_percent:.0f}% to next)")
    _emit(f"Total XP: {summary.total_xp} (today: {summary.today_xp}, {summary.today_percentage:.0f}% done)")
    _emit(f"Average: {summary.xp_per_day} XP/day")
    _emit(f"Streak: {summary.current_streak} day(s), longest {summary.longest_streak}")
    _emit(f"Streak freezes: {summary.streak_freeze_count}")
    _emit(f"Years saved: {summary.years_saved:.1f}")
    _emit(f"Bio-age: {summary.bio_age.biological_age:.1f} (grade {summary.bio_age.grade})")
    _emit(f"Last {len(summary.weekly_history)} days:")
    for day in summary.weekly_history:
        _emit(f"  {day.on_date.isoformat()}  {day.completions:>2} task(s)  {day.percentage:5.1f}%")
    if summary.unlocked_achievements:
        _emit(f"Achievements: {', '.join(summary.unlocked_achievements)}")
    return 0


async def cmd_bio_age(session: HabitSession, args: argparse.Namespace) -> int:
    today = _parse_date(args.date)
    factors = bio_age_service.calculate_factors_from_completions(
        session.ledger.records,
        current_streak=session.engine.current_streak,
        days_since_start=bio_age_service.days_since_start(session.profile.created_at, date_to_now(today)),
        today=today,
        catalog_size=len(session.catalog),
    )
    result = bio_age_service.calculate_bio_age(
        BioAgeInput(
            **factors.model_dump(),
            chronological_age=_age(args.age),
            smoking_status=SmokingStatus(args.smoking),
            alcohol_frequency=AlcoholFrequency(args.alcohol),
        )
    )
    _emit(
        f"Biological age {result.biological_age:.1f} vs {result.chronological_age:.0f} "
        f"({result.age_difference:+.1f} years), grade {result.grade}, percentile {result.percentile}"
    )
    _emit(bio_age_service.get_bio_age_message(result))
    for factor in result.factors:
        _emit(f"  {factor.name:<12} {factor.score:5.1f}  {factor.status:<9} {factor.impact:+.2f} yrs")
    return 0


async def cmd_budget(session: HabitSession, args: argparse.Namespace) -> int:
    tier = CostTier(args.tier)
    monthly = cost_tier_service.calculate_monthly_protocol_cost()
    savings = cost_tier_service.calculate_tier_savings(tier)
    roi = healthcare_roi_service.calculate_roi(cost_tier_service.annual_protocol_cost(tier), _age(args.age))
    healthcare = healthcare_roi_service.calculate_healthcare_savings(_age(args.age))

    _emit("Monthly protocol cost:")
    for each in CostTier:
        _emit(f"  {TIER_LABELS[each]:<8} ${monthly.for_tier(each):,.2f}")
    _emit(
        f"{tier} saves ${savings.monthly_savings:,.2f}/month (${savings.yearly_savings:,.2f}/year, "
        f"{savings.savings_percent}%) against premium"
    )
    _emit(
        f"Healthcare savings: ${healthcare.annual:,}/year, ${healthcare.ten_year:,} over 10 years, "
        f"${healthcare.lifetime:,} lifetime"
    )
    _emit(
        f"ROI {roi.roi_percent}%, break-even in {roi.break_even_months} month(s), "
        f"10-year net ${roi.net_savings_10_year:,}"
    )
    for fact in LONGEVITY_FACTS:
        _emit(f"  {fact.stat:>9}  {fact.label} ({fact.source})")
    if not session.profile.has_budget_access:
        _emit("Tip: run `habitforge unlock-budget` to keep budget comparisons on your profile.")
    return 0


async def cmd_freeze(session: HabitSession, args: argparse.Namespace) -> int:
    if args.freeze_action == "add":
        total = await session.add_streak_freeze(args.count)
        _emit(f"Streak freezes: {total}")
        return 0

    if await session.use_streak_freeze():
        _emit(f"Used a streak freeze. Remaining: {session.engine.streak_freeze_count}")
        return 0
    _emit("No streak freezes left.")
    return 1


async def cmd_premium(session: HabitSession, args: argparse.Namespace) -> int:
    await session.set_premium(args.state == "on")
    _emit(f"Premium {'enabled' if session.profile.is_premium else 'disabled'}.")
    return 0


async def cmd_unlock_budget(session: HabitSession, args: argparse.Namespace) -> int:
    await session.unlock_budget_access()
    _emit("Budget comparisons unlocked.")
    return 0


async def cmd_reset(session: HabitSession, args: argparse.Namespace) -> int:
    if not args.yes:
        _emit("This deletes all progress. Re-run with --yes to confirm.")
        return 2
    await session.reset()
    _emit("Progress reset.")
    return 0


def date_to_now(on_date: date) -> datetime:
    """Wall-clock instant used for day counts when reporting on on_date."""
    if on_date == utc_today():
        return datetime.now(UTC)
    return datetime.combine(on_date, time.max, tzinfo=UTC)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="habitforge", description="Track the daily longevity protocol")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    tasks = subparsers.add_parser("tasks", help="List protocol tasks and their completion state")
    tasks.add_argument("--date", help="Day to show (YYYY-MM-DD, default: today)")
    tasks.set_defaults(handler=cmd_tasks)

    complete = subparsers.add_parser("complete", help="Mark a task completed")
    complete.add_argument("task_id")
    complete.add_argument("--date", help="Day of the completion (YYYY-MM-DD, default: today)")
    complete.set_defaults(handler=cmd_complete)

    undo = subparsers.add_parser("undo", help="Undo a completion")
    undo.add_argument("task_id")
    undo.add_argument("--date", help="Day of the completion (YYYY-MM-DD, default: today)")
    undo.set_defaults(handler=cmd_undo)

    status = subparsers.add_parser("status", help="Show level, streaks and weekly history")
    status.add_argument("--date", help="Day to report on (YYYY-MM-DD, default: today)")
    status.add_argument("--age", type=_positive_age, default=None, help="Chronological age for bio-age")
    status.add_argument("--json", action="store_true", help="Print the summary as JSON")
    status.add_argument("--storage", action="store_true", help="Show storage backend health instead")
    status.set_defaults(handler=cmd_status)

    bio_age = subparsers.add_parser("bio-age", help="Estimate biological age from recent completions")
    bio_age.add_argument("--date", help="Last day of the scoring week (YYYY-MM-DD, default: today)")
    bio_age.add_argument("--age", type=_positive_age, default=None, help="Chronological age")
    bio_age.add_argument("--smoking", choices=[s.value for s in SmokingStatus], default=SmokingStatus.NEVER.value)
    bio_age.add_argument(
        "--alcohol", choices=[a.value for a in AlcoholFrequency], default=AlcoholFrequency.OCCASIONAL.value
    )
    bio_age.set_defaults(handler=cmd_bio_age)

    budget = subparsers.add_parser("budget", help="Compare tier costs and healthcare ROI")
    budget.add_argument("--tier", default=CostTier.BUDGET.value, help="premium, budget or ultra_budget")
    budget.add_argument("--age", type=_positive_age, default=None, help="Chronological age for ROI")
    budget.set_defaults(handler=cmd_budget)

    freeze = subparsers.add_parser("freeze", help="Manage streak freezes")
    freeze_actions = freeze.add_subparsers(dest="freeze_action", required=True)
    freeze_add = freeze_actions.add_parser("add", help="Bank streak freezes")
    freeze_add.add_argument("--count", type=int, default=1)
    freeze_actions.add_parser("use", help="Consume one streak freeze")
    freeze.set_defaults(handler=cmd_freeze)

    premium = subparsers.add_parser("premium", help="Toggle premium on the profile")
    premium.add_argument("state", choices=["on", "off"])
    premium.set_defaults(handler=cmd_premium)

    unlock_budget = subparsers.add_parser("unlock-budget", help="Unlock budget comparisons")
    unlock_budget.set_defaults(handler=cmd_unlock_budget)

    reset = subparsers.add_parser("reset", help="Delete all progress")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")
    reset.set_defaults(handler=cmd_reset)

    return parser


async def run_command(args: argparse.Namespace, session: HabitSession | None = None) -> int:
    """Run the parsed command against session, loading one from storage if not given."""
    owns_session = session is None
    if session is None:
        session = await HabitSession.load(create_kv_store())
    try:
        return await args.handler(session, args)
    finally:
        if owns_session:
            await session.close()
        else:
            await session.flush()


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the habitforge CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    configure_logfire()

    try:
        return asyncio.run(run_command(args))
    except Exception as e:
        response = classify_error_with_response(e)
        logger.error("command_failed", extra={"command": args.command, "code": response.code, "error": str(e)})
        _emit(f"Error: {response.message}")
        _emit(response.suggestion)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
