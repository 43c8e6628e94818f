"""Biological-age estimate from app-usage proxies.

This is a deterministic formula, not physiology. Five 0-100 sub-scores are
derived from the last week of completions; each maps linearly onto a +/- year
impact around a neutral score of 50:

    impact = ((score - 50) / 50) * weight

Stress is "lower is better", so it is inverted before weighting. Smoking and
alcohol add fixed offsets. The sum of all impacts is the age delta.
"""

import logging
import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from habitforge.core.config import Constants
from habitforge.core.logging import span
from habitforge.core.numbers import round_half_up, safe_ratio
from habitforge.domain.completion import CompletionRecord
from habitforge.domain.metrics import AlcoholFrequency, BioAgeGrade, FactorStatus, SmokingStatus
from habitforge.models.service_models import BioAgeFactor, BioAgeInput, BioAgeResult, CompletionFactors


logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0

EXERCISE_WEIGHT = -3.0
SLEEP_WEIGHT = -2.5
NUTRITION_WEIGHT = -2.0
STRESS_WEIGHT = -1.5
CONSISTENCY_WEIGHT = -2.0

SMOKING_IMPACT: dict[SmokingStatus, float] = {
    SmokingStatus.NEVER: 0.0,
    SmokingStatus.FORMER: 2.0,
    SmokingStatus.CURRENT: 5.0,
}

ALCOHOL_IMPACT: dict[AlcoholFrequency, float] = {
    AlcoholFrequency.NEVER: -0.5,
    AlcoholFrequency.OCCASIONAL: 0.0,
    AlcoholFrequency.MODERATE: 1.0,
    AlcoholFrequency.HEAVY: 3.0,
}

# Upper bounds of the age delta for each grade, checked in order
GRADE_BANDS: tuple[tuple[float, BioAgeGrade], ...] = (
    (-5, BioAgeGrade.A_PLUS),
    (-3, BioAgeGrade.A),
    (0, BioAgeGrade.B),
    (3, BioAgeGrade.C),
    (5, BioAgeGrade.D),
)

# Task-id keywords and the weekly completion count that scores 100
EXERCISE_KEYWORDS = ("exercise", "cardio")
SLEEP_KEYWORDS = ("sleep", "wind-down")
NUTRITION_KEYWORDS = ("veggie", "pudding", "supplement")
EXERCISE_WEEKLY_TARGET = 14
SLEEP_WEEKLY_TARGET = 14
NUTRITION_WEEKLY_TARGET = 28

STRESS_POINTS_PER_STREAK_DAY = 5

_MESSAGES: tuple[tuple[float, str], ...] = (
    (-5, "Exceptional! You're aging slower than 99% of people your age."),
    (-3, "Excellent work! Your biological age is significantly younger than your actual age."),
    (0, "Great job! You're maintaining or improving your biological age."),
    (3, "Room for improvement. Focus on consistency to lower your bio-age."),
)
_FALLBACK_MESSAGE = "Let's work on this together. Small daily habits make a big difference."


def factor_status(score: float) -> FactorStatus:
    if score >= 80:
        return FactorStatus.EXCELLENT
    if score >= 60:
        return FactorStatus.GOOD
    if score >= 40:
        return FactorStatus.FAIR
    return FactorStatus.POOR


def grade_for_delta(age_difference: float) -> BioAgeGrade:
    for upper_bound, grade in GRADE_BANDS:
        if age_difference <= upper_bound:
            return grade
    return BioAgeGrade.F


def _linear_impact(score: float, weight: float) -> float:
    return ((score - NEUTRAL_SCORE) / NEUTRAL_SCORE) * weight


def _keyword_score(records: list[CompletionRecord], keywords: tuple[str, ...], weekly_target: int) -> float:
    matches = sum(1 for record in records if any(keyword in record.task_id for keyword in keywords))
    return min(100.0, matches / weekly_target * 100)


def days_since_start(created_at: datetime, now: datetime) -> int:
    """Whole days since tracking started, never less than 1."""
    elapsed_days = (now - created_at).total_seconds() / 86400
    return max(1, math.floor(elapsed_days))


def calculate_factors_from_completions(
    completions: Iterable[CompletionRecord],
    *,
    current_streak: int,
    days_since_start: int,
    today: date,
    catalog_size: int,
) -> CompletionFactors:
    """Derive the five sub-scores from completion history.

    Exercise, sleep and nutrition count keyword matches in the week ending on
    today (inclusive). Consistency blends the current streak with the
    all-time completion rate.

    Args:
        completions: Every recorded completion
        current_streak: Current day streak
        days_since_start: Whole days since tracking started (>= 1)
        today: Last day of the scoring window
        catalog_size: Number of tasks in the daily checklist

    Returns:
        CompletionFactors with every score in [0, 100]
    """
    all_records = list(completions)
    window_start = today - timedelta(days=Constants.BIO_AGE_WINDOW_DAYS - 1)
    recent = [record for record in all_records if window_start <= record.date <= today]

    stress_score = max(0.0, 100.0 - current_streak * STRESS_POINTS_PER_STREAK_DAY)

    completion_rate = safe_ratio(len(all_records), days_since_start * catalog_size)
    consistency_score = min(100.0, current_streak / 7 * 50 + completion_rate * 50)

    return CompletionFactors(
        exercise_score=_keyword_score(recent, EXERCISE_KEYWORDS, EXERCISE_WEEKLY_TARGET),
        sleep_score=_keyword_score(recent, SLEEP_KEYWORDS, SLEEP_WEEKLY_TARGET),
        nutrition_score=_keyword_score(recent, NUTRITION_KEYWORDS, NUTRITION_WEEKLY_TARGET),
        stress_score=stress_score,
        consistency_score=consistency_score,
    )


def calculate_bio_age(bio_input: BioAgeInput) -> BioAgeResult:
    """Estimate biological age from sub-scores and lifestyle inputs."""
    with span("bio_age_service.calculate_bio_age"):
        exercise_impact = _linear_impact(bio_input.exercise_score, EXERCISE_WEIGHT)
        sleep_impact = _linear_impact(bio_input.sleep_score, SLEEP_WEIGHT)
        nutrition_impact = _linear_impact(bio_input.nutrition_score, NUTRITION_WEIGHT)
        stress_impact = _linear_impact(100 - bio_input.stress_score, STRESS_WEIGHT)
        consistency_impact = _linear_impact(bio_input.consistency_score, CONSISTENCY_WEIGHT)
        smoking_impact = SMOKING_IMPACT[bio_input.smoking_status]
        alcohol_impact = ALCOHOL_IMPACT[bio_input.alcohol_frequency]

        age_difference = (
            exercise_impact
            + sleep_impact
            + nutrition_impact
            + stress_impact
            + consistency_impact
            + smoking_impact
            + alcohol_impact
        )

        percentile = round_half_up(50 - age_difference * 8)
        percentile = max(Constants.PERCENTILE_MIN, min(Constants.PERCENTILE_MAX, percentile))

        displayed_stress = 100 - bio_input.stress_score
        lifestyle_score = max(0.0, 100 - smoking_impact * 10 - alcohol_impact * 10)

        factors = [
            BioAgeFactor(
                name="Exercise",
                score=bio_input.exercise_score,
                status=factor_status(bio_input.exercise_score),
                impact=exercise_impact,
            ),
            BioAgeFactor(
                name="Sleep",
                score=bio_input.sleep_score,
                status=factor_status(bio_input.sleep_score),
                impact=sleep_impact,
            ),
            BioAgeFactor(
                name="Nutrition",
                score=bio_input.nutrition_score,
                status=factor_status(bio_input.nutrition_score),
                impact=nutrition_impact,
            ),
            BioAgeFactor(
                name="Stress",
                score=displayed_stress,
                status=factor_status(displayed_stress),
                impact=stress_impact,
            ),
            BioAgeFactor(
                name="Consistency",
                score=bio_input.consistency_score,
                status=factor_status(bio_input.consistency_score),
                impact=consistency_impact,
            ),
            BioAgeFactor(
                name="Lifestyle",
                score=lifestyle_score,
                status=factor_status(lifestyle_score),
                impact=smoking_impact + alcohol_impact,
            ),
        ]

        result = BioAgeResult(
            biological_age=bio_input.chronological_age + age_difference,
            chronological_age=bio_input.chronological_age,
            age_difference=age_difference,
            grade=grade_for_delta(age_difference),
            percentile=percentile,
            factors=factors,
        )
        logger.debug("Bio-age delta %.2f years, grade %s", age_difference, result.grade)
        return result


def get_bio_age_message(result: BioAgeResult) -> str:
    for upper_bound, message in _MESSAGES:
        if result.age_difference <= upper_bound:
            return message
    return _FALLBACK_MESSAGE


def xp_to_years_saved(xp: int) -> float:
    """Rough estimate: every 1000 XP is 0.1 years."""
    return xp / 1000 * 0.1
