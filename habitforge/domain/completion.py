"""Completion ledger domain models."""

import datetime

from pydantic import BaseModel, ConfigDict, Field

from habitforge.core.config import Constants


class CompletionRecord(BaseModel):
    """One task completed on one calendar day.

    ``xp_awarded`` is captured at completion time so later catalog edits never
    rewrite history.
    """

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(..., min_length=1, description="ID of the completed task")
    date: datetime.date = Field(..., description="Calendar day of the completion (no time component)")
    xp_awarded: int = Field(..., ge=0, description="XP credited for this completion")


class LedgerSnapshot(BaseModel):
    """Serialized form of the ledger stored under ``task-storage``."""

    version: int = Field(default=Constants.SNAPSHOT_VERSION, description="Snapshot format version")
    completions: list[CompletionRecord] = Field(default_factory=list)
