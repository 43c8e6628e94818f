"""Healthcare savings and return-on-investment projections.

Savings are a flat share of the typical annual healthcare spend for the
user's age decade. ROI compares those savings with what the protocol costs
per year.
"""

import logging
import math

from habitforge.catalog.healthcare import BASE_ANNUAL_COSTS, FALLBACK_COST_BRACKET, RISK_REDUCTIONS
from habitforge.core.config import Constants
from habitforge.core.logging import span
from habitforge.core.numbers import round_half_up
from habitforge.models.service_models import HealthcareSavings, ROIResult


logger = logging.getLogger(__name__)


def base_annual_cost(age: float) -> int:
    """Typical annual healthcare spend for the decade containing age."""
    bracket = math.floor(age / 10) * 10
    return BASE_ANNUAL_COSTS.get(bracket, BASE_ANNUAL_COSTS[FALLBACK_COST_BRACKET])


def estimated_prevented_conditions() -> int:
    """Expected number of conditions avoided, summing each risk reduction."""
    return round_half_up(sum(risk.reduction_percent for risk in RISK_REDUCTIONS) / 100)


def calculate_healthcare_savings(age: float) -> HealthcareSavings:
    """Project annual, 10-year and lifetime healthcare savings.

    Lifetime runs to the life-expectancy age, but never fewer than
    ``Constants.MIN_YEARS_REMAINING`` years.

    Args:
        age: Chronological age in years

    Returns:
        HealthcareSavings in whole dollars
    """
    annual = round_half_up(base_annual_cost(age) * Constants.HEALTHCARE_REDUCTION_FACTOR)
    years_remaining = max(Constants.MIN_YEARS_REMAINING, Constants.LIFE_EXPECTANCY_AGE - age)
    return HealthcareSavings(
        annual=annual,
        ten_year=annual * 10,
        lifetime=round_half_up(annual * years_remaining),
        prevented_conditions=estimated_prevented_conditions(),
    )


def calculate_roi(annual_protocol_cost: float, age: float) -> ROIResult:
    """Compare projected healthcare savings with an annual protocol cost.

    A non-positive cost yields ROI 0, and break-even falls back to
    ``Constants.DEFAULT_BREAK_EVEN_MONTHS`` whenever the ratio is undefined.

    Args:
        annual_protocol_cost: Yearly spend on the protocol in USD
        age: Chronological age in years

    Returns:
        ROIResult
    """
    with span("healthcare_roi_service.calculate_roi"):
        savings = calculate_healthcare_savings(age)

        if annual_protocol_cost > 0:
            roi_percent = round_half_up((savings.annual - annual_protocol_cost) / annual_protocol_cost * 100)
        else:
            roi_percent = 0

        monthly_savings = savings.annual / Constants.MONTHS_PER_YEAR
        if annual_protocol_cost > 0 and monthly_savings > 0:
            break_even_months = math.ceil(annual_protocol_cost / monthly_savings)
        else:
            break_even_months = Constants.DEFAULT_BREAK_EVEN_MONTHS

        result = ROIResult(
            roi_percent=roi_percent,
            break_even_months=break_even_months,
            net_savings_10_year=round_half_up(savings.ten_year - annual_protocol_cost * 10),
        )
        logger.debug(
            "ROI computed",
            extra={"annual_protocol_cost": annual_protocol_cost, "age": age, "roi_percent": roi_percent},
        )
        return result
