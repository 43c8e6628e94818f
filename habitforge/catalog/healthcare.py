"""Healthcare cost reference tables."""

from habitforge.domain.metrics import LongevityFact, RiskReduction


# Typical annual healthcare spend by age decade (USD)
BASE_ANNUAL_COSTS: dict[int, int] = {
    20: 3000,
    30: 4500,
    40: 6000,
    50: 9000,
    60: 12000,
    70: 18000,
}

# Bracket used when an age falls outside the table
FALLBACK_COST_BRACKET = 30

RISK_REDUCTIONS: tuple[RiskReduction, ...] = (
    RiskReduction(condition="Type 2 Diabetes", reduction_percent=58, annual_cost_if_developed=9600),
    RiskReduction(condition="Heart Disease", reduction_percent=50, annual_cost_if_developed=18000),
    RiskReduction(condition="Certain Cancers", reduction_percent=30, annual_cost_if_developed=42000),
    RiskReduction(condition="Cognitive Decline", reduction_percent=40, annual_cost_if_developed=65000),
    RiskReduction(condition="Obesity-Related Issues", reduction_percent=65, annual_cost_if_developed=8000),
)

LONGEVITY_FACTS: tuple[LongevityFact, ...] = (
    LongevityFact(stat="7+ years", label="Life expectancy increase with healthy lifestyle", source="Harvard Study"),
    LongevityFact(stat="80%", label="Of chronic diseases are preventable", source="WHO"),
    LongevityFact(stat="$11,000", label="Average annual healthcare savings", source="Health Affairs"),
    LongevityFact(stat="50%", label="Lower mortality with daily exercise", source="JAMA"),
)
