from habitforge.services import (
    achievement_service,
    analytics_service,
    bio_age_service,
    cost_tier_service,
    healthcare_roi_service,
)
from habitforge.services.completion_ledger import CompletionLedger
from habitforge.services.progression_engine import ProgressionEngine
from habitforge.services.session_service import HabitSession


__all__ = [
    "CompletionLedger",
    "HabitSession",
    "ProgressionEngine",
    "achievement_service",
    "analytics_service",
    "bio_age_service",
    "cost_tier_service",
    "healthcare_roi_service",
]
