"""Cost comparison across the premium, budget and ultra-budget tiers.

Totals are display figures only. Supplements are priced per month; meals
are priced per serving and eaten once a day each.
"""

import logging
from collections.abc import Callable, Iterable

from habitforge.catalog.meals import MEALS
from habitforge.catalog.supplements import FULL_STACK_IDS, SUPPLEMENTS
from habitforge.core.config import Constants
from habitforge.core.numbers import round_half_up, safe_ratio
from habitforge.domain.metrics import CostTier, Meal, Supplement
from habitforge.models.service_models import MealCostSummary, TierSavings, TierTotals


logger = logging.getLogger(__name__)


def _tier_totals(price_by_tier: Callable[[CostTier], float]) -> TierTotals:
    return TierTotals(**{tier.value: price_by_tier(tier) for tier in CostTier})


def calculate_all_tier_totals(
    supplement_ids: Iterable[str],
    supplements: Iterable[Supplement] = SUPPLEMENTS,
) -> TierTotals:
    """Monthly supplement cost for the given ids at every tier.

    Unknown ids are ignored and an empty selection costs 0 at every tier.
    """
    wanted = set(supplement_ids)
    selected = [supplement for supplement in supplements if supplement.id in wanted]
    return _tier_totals(lambda tier: sum(supplement.price_for(tier) for supplement in selected))


def calculate_meal_tier_totals(meals: Iterable[Meal] = MEALS) -> MealCostSummary:
    """Daily and monthly cost of eating every protocol meal once a day."""
    meals = list(meals)
    daily = _tier_totals(lambda tier: sum(meal.version_for(tier).cost_per_serving for meal in meals))
    monthly = _tier_totals(lambda tier: daily.for_tier(tier) * Constants.DAYS_PER_MONTH)
    return MealCostSummary(daily=daily, monthly=monthly)


def calculate_monthly_protocol_cost(supplement_ids: Iterable[str] = FULL_STACK_IDS) -> TierTotals:
    """Supplements plus meals per month at every tier."""
    supplement_totals = calculate_all_tier_totals(supplement_ids)
    meal_totals = calculate_meal_tier_totals().monthly
    return _tier_totals(lambda tier: supplement_totals.for_tier(tier) + meal_totals.for_tier(tier))


def annual_protocol_cost(tier: CostTier, supplement_ids: Iterable[str] = FULL_STACK_IDS) -> float:
    return calculate_monthly_protocol_cost(supplement_ids).for_tier(tier) * Constants.MONTHS_PER_YEAR


def calculate_tier_savings(tier: CostTier, supplement_ids: Iterable[str] = FULL_STACK_IDS) -> TierSavings:
    """How much choosing tier saves against premium, per month and per year."""
    monthly = calculate_monthly_protocol_cost(supplement_ids)
    premium_cost = monthly.for_tier(CostTier.PREMIUM)
    tier_cost = monthly.for_tier(tier)
    monthly_savings = premium_cost - tier_cost
    return TierSavings(
        tier=tier,
        monthly_cost=tier_cost,
        monthly_savings=monthly_savings,
        yearly_savings=monthly_savings * Constants.MONTHS_PER_YEAR,
        savings_percent=round_half_up(safe_ratio(monthly_savings, premium_cost) * 100),
    )
