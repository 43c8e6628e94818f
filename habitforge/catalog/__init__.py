"""Static catalogs: protocol tasks, priced items and reference tables."""

from habitforge.catalog.achievements import ACHIEVEMENTS
from habitforge.catalog.healthcare import BASE_ANNUAL_COSTS, LONGEVITY_FACTS, RISK_REDUCTIONS
from habitforge.catalog.meals import MEALS
from habitforge.catalog.protocol import (
    LEVEL_THRESHOLDS,
    LEVEL_TITLES,
    MAX_LEVEL,
    PROTOCOL_TASKS,
    TaskCatalog,
    default_catalog,
)
from habitforge.catalog.supplements import FULL_STACK_IDS, SUPPLEMENTS, TIER_LABELS


__all__ = [
    "ACHIEVEMENTS",
    "BASE_ANNUAL_COSTS",
    "FULL_STACK_IDS",
    "LEVEL_THRESHOLDS",
    "LEVEL_TITLES",
    "LONGEVITY_FACTS",
    "MAX_LEVEL",
    "MEALS",
    "PROTOCOL_TASKS",
    "RISK_REDUCTIONS",
    "SUPPLEMENTS",
    "TIER_LABELS",
    "TaskCatalog",
    "default_catalog",
]
