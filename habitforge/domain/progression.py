"""Progression and profile domain models."""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field, model_validator

from habitforge.core.config import Constants


class ProgressionState(BaseModel):
    """Cumulative XP, streak counters and streak-freeze inventory."""

    total_xp: int = Field(default=0, ge=0, description="Cumulative XP, clamped at zero")
    current_streak: int = Field(default=0, ge=0, description="Consecutive fully completed days")
    longest_streak: int = Field(default=0, ge=0, description="High-water mark of current_streak")
    last_completed_date: date | None = Field(
        default=None, description="Last day on which every catalog task was completed"
    )
    streak_freeze_count: int = Field(default=0, ge=0, description="Banked streak freezes")

    @model_validator(mode="after")
    def validate_streak_high_water_mark(self) -> "ProgressionState":
        """Ensure longest_streak never trails current_streak."""
        if self.longest_streak < self.current_streak:
            msg = f"longest_streak ({self.longest_streak}) cannot be below current_streak ({self.current_streak})"
            raise ValueError(msg)
        return self


class UserProfile(BaseModel):
    """Profile facts stored alongside progression."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When tracking started")
    is_premium: bool = Field(default=False, description="Unlimited tier unlocked")
    has_budget_access: bool = Field(default=False, description="Budget comparison unlocked")


class UserSnapshot(BaseModel):
    """Serialized form stored under ``user-storage``."""

    version: int = Field(default=Constants.SNAPSHOT_VERSION, description="Snapshot format version")
    progression: ProgressionState = Field(default_factory=ProgressionState)
    profile: UserProfile = Field(default_factory=UserProfile)
