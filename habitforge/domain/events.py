"""Events published by the completion ledger."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class XPChanged(BaseModel):
    """A completion was recorded (positive delta) or undone (negative delta)."""

    model_config = ConfigDict(frozen=True)

    delta: int = Field(..., description="Signed XP change")
    task_id: str = Field(..., description="Task whose completion caused the change")
    on_date: date = Field(..., description="Calendar day of the completion")


class DayCompleted(BaseModel):
    """Every catalog task now has a completion for ``on_date``."""

    model_config = ConfigDict(frozen=True)

    on_date: date = Field(..., description="The fully completed day")
