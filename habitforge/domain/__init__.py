"""Domain models and DTOs."""

from habitforge.domain.completion import CompletionRecord, LedgerSnapshot
from habitforge.domain.events import DayCompleted, XPChanged
from habitforge.domain.metrics import (
    Achievement,
    AchievementKind,
    AlcoholFrequency,
    BioAgeGrade,
    CostTier,
    FactorStatus,
    LongevityFact,
    Meal,
    MealVersion,
    PricedBrand,
    RiskReduction,
    SmokingStatus,
    Supplement,
)
from habitforge.domain.progression import ProgressionState, UserProfile, UserSnapshot
from habitforge.domain.task import Task, TaskCategory


__all__ = [
    "Achievement",
    "AchievementKind",
    "AlcoholFrequency",
    "BioAgeGrade",
    "CompletionRecord",
    "CostTier",
    "DayCompleted",
    "FactorStatus",
    "LedgerSnapshot",
    "LongevityFact",
    "Meal",
    "MealVersion",
    "PricedBrand",
    "ProgressionState",
    "RiskReduction",
    "SmokingStatus",
    "Supplement",
    "Task",
    "TaskCategory",
    "UserProfile",
    "UserSnapshot",
    "XPChanged",
]
