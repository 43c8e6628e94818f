"""Task catalog domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TaskCategory(StrEnum):
    """Part of the day a protocol task belongs to."""

    MORNING = "morning"
    NUTRITION = "nutrition"
    EXERCISE = "exercise"
    EVENING = "evening"
    MINDSET = "mindset"


class Task(BaseModel):
    """Daily protocol task (catalog entry, never mutated)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique task ID (e.g., 'wake-early')")
    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Detailed task description")
    xp: int = Field(..., gt=0, description="XP credited when the task is completed")
    category: TaskCategory = Field(..., description="Task category")
