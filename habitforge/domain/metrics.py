"""Domain models and enums for derived metrics and priced catalogs."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class CostTier(StrEnum):
    """Cost/quality level used for comparison display."""

    PREMIUM = "premium"
    BUDGET = "budget"
    ULTRA_BUDGET = "ultra_budget"


class SmokingStatus(StrEnum):
    """Self-reported smoking status."""

    NEVER = "never"
    FORMER = "former"
    CURRENT = "current"


class AlcoholFrequency(StrEnum):
    """Self-reported drinking frequency."""

    NEVER = "never"
    OCCASIONAL = "occasional"
    MODERATE = "moderate"
    HEAVY = "heavy"


class BioAgeGrade(StrEnum):
    """Letter grade for the bio-age delta."""

    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class FactorStatus(StrEnum):
    """Display band for a 0-100 factor score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class PricedBrand(BaseModel):
    """A brand choice for one supplement at one tier."""

    model_config = ConfigDict(frozen=True)

    brand: str
    price: float = Field(..., ge=0, description="Monthly cost in USD")
    link: str | None = None


class Supplement(BaseModel):
    """Supplement priced at every cost tier."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    tiers: dict[CostTier, PricedBrand]

    def price_for(self, tier: CostTier) -> float:
        return self.tiers[tier].price


class MealVersion(BaseModel):
    """Ingredients and per-serving cost of one version of a meal."""

    model_config = ConfigDict(frozen=True)

    ingredients: tuple[str, ...]
    cost_per_serving: float = Field(..., ge=0, description="USD per serving")
    swaps: tuple[str, ...] = ()


class Meal(BaseModel):
    """Protocol meal with a premium and a budget version."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    calories: int
    protein: int
    prep_time_minutes: int
    premium_version: MealVersion
    budget_version: MealVersion

    def version_for(self, tier: CostTier) -> MealVersion:
        """Ultra-budget shares the budget recipe."""
        if tier == CostTier.PREMIUM:
            return self.premium_version
        return self.budget_version


class RiskReduction(BaseModel):
    """Condition whose risk the protocol reduces."""

    model_config = ConfigDict(frozen=True)

    condition: str
    reduction_percent: float = Field(..., ge=0, le=100)
    annual_cost_if_developed: float = Field(..., ge=0)


class LongevityFact(BaseModel):
    """Headline statistic shown next to ROI figures."""

    model_config = ConfigDict(frozen=True)

    stat: str
    label: str
    source: str


class AchievementKind(StrEnum):
    """Which counter an achievement threshold applies to."""

    COMPLETIONS = "completions"
    LONGEST_STREAK = "longest_streak"
    LEVEL = "level"


class Achievement(BaseModel):
    """Milestone unlocked when a counter reaches its requirement."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    kind: AchievementKind
    requirement: int = Field(..., gt=0)
