"""Pydantic models for service layer return types.

These models give consumers typed, validated results at service boundaries
instead of ad-hoc dictionaries.
"""

from datetime import date

from pydantic import BaseModel, Field

from habitforge.domain.completion import CompletionRecord
from habitforge.domain.metrics import (
    AlcoholFrequency,
    BioAgeGrade,
    CostTier,
    FactorStatus,
    SmokingStatus,
)


class LevelProgress(BaseModel):
    """Position of a total XP value inside its level band."""

    level: int
    xp_in_level: int
    xp_needed: int
    progress_percent: float


class StreakUpdate(BaseModel):
    """Outcome of one update_streak call."""

    changed: bool
    previous_streak: int
    current_streak: int
    longest_streak: int
    streak_broken: bool = False


class CompletionResult(BaseModel):
    """Outcome of completing or undoing a task through the session."""

    task_id: str
    on_date: date
    applied: bool = Field(..., description="False when the call was an idempotent no-op")
    record: CompletionRecord | None = None
    xp_delta: int = 0
    total_xp: int
    level: int
    leveled_up: bool = False
    day_completed: bool = False
    current_streak: int
    longest_streak: int


class CompletionFactors(BaseModel):
    """Five 0-100 sub-scores derived from recent completions."""

    exercise_score: float = Field(..., ge=0, le=100)
    sleep_score: float = Field(..., ge=0, le=100)
    nutrition_score: float = Field(..., ge=0, le=100)
    stress_score: float = Field(..., ge=0, le=100)
    consistency_score: float = Field(..., ge=0, le=100)


class BioAgeInput(CompletionFactors):
    """Everything the bio-age formula needs."""

    chronological_age: float = Field(..., gt=0)
    smoking_status: SmokingStatus = SmokingStatus.NEVER
    alcohol_frequency: AlcoholFrequency = AlcoholFrequency.OCCASIONAL


class BioAgeFactor(BaseModel):
    """One line of the bio-age breakdown."""

    name: str
    score: float
    status: FactorStatus
    impact: float = Field(..., description="Years added (positive) or removed (negative)")


class BioAgeResult(BaseModel):
    """Biological age estimate."""

    biological_age: float
    chronological_age: float
    age_difference: float
    grade: BioAgeGrade
    percentile: int = Field(..., ge=1, le=99)
    factors: list[BioAgeFactor]


class HealthcareSavings(BaseModel):
    """Projected healthcare savings for an age."""

    annual: int
    ten_year: int
    lifetime: int
    prevented_conditions: int


class ROIResult(BaseModel):
    """Return on an annual protocol spend."""

    roi_percent: int
    break_even_months: int
    net_savings_10_year: int


class TierTotals(BaseModel):
    """A cost summed per tier."""

    premium: float = 0.0
    budget: float = 0.0
    ultra_budget: float = 0.0

    def for_tier(self, tier: CostTier) -> float:
        return getattr(self, tier.value)


class MealCostSummary(BaseModel):
    """Daily and monthly meal costs per tier."""

    daily: TierTotals
    monthly: TierTotals


class TierSavings(BaseModel):
    """How much a tier saves against the premium tier."""

    tier: CostTier
    monthly_cost: float
    monthly_savings: float
    yearly_savings: float
    savings_percent: int


class DailyCompletion(BaseModel):
    """Completions on one day of a history window."""

    on_date: date
    completions: int
    percentage: float


class ProgressSummary(BaseModel):
    """Everything a progress overview needs, computed in one pass."""

    total_xp: int
    level: int
    level_title: str
    level_progress: LevelProgress
    current_streak: int
    longest_streak: int
    streak_freeze_count: int
    today_percentage: float
    today_xp: int
    xp_per_day: int = Field(..., ge=0, description="Average XP earned per day since tracking started")
    years_saved: float
    bio_age: BioAgeResult
    budget_monthly_cost: float
    weekly_history: list[DailyCompletion]
    unlocked_achievements: list[str]
