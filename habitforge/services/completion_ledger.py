"""Completion ledger: which tasks were completed on which calendar day.

The ledger owns idempotency (at most one record per task per day) and undo.
It does not touch progression state directly; instead it publishes events on
the session's EventBus:

- XPChanged after every applied completion (+xp) or undo (-xp_awarded)
- DayCompleted when a completion makes every catalog task done for that day

Undo never publishes a streak reversal, so a streak already granted for a
fully completed day survives an undo on that same day.
"""

import logging
from collections.abc import Iterable
from datetime import date

from habitforge.catalog.protocol import TaskCatalog
from habitforge.core.config import settings
from habitforge.core.events import EventBus
from habitforge.domain.completion import CompletionRecord, LedgerSnapshot
from habitforge.domain.events import DayCompleted, XPChanged


logger = logging.getLogger(__name__)


class CompletionLedger:
    """Per-day completion records indexed by ``(task_id, date)``."""

    def __init__(
        self,
        catalog: TaskCatalog,
        bus: EventBus,
        *,
        default_xp: int | None = None,
        records: Iterable[CompletionRecord] = (),
    ) -> None:
        self._catalog = catalog
        self._bus = bus
        self._default_xp = default_xp if default_xp is not None else settings.default_task_xp
        self._records: dict[tuple[str, date], CompletionRecord] = {}
        for record in records:
            # Later duplicates win; a snapshot should never contain any
            self._records[(record.task_id, record.date)] = record

    @property
    def records(self) -> tuple[CompletionRecord, ...]:
        """All records in insertion order."""
        return tuple(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def xp_for_task(self, task_id: str) -> int:
        """XP a completion of task_id is worth right now."""
        task = self._catalog.get(task_id)
        if task is None:
            return self._default_xp
        return task.xp

    def record_completion(self, task_id: str, today: date) -> CompletionRecord | None:
        """Record that task_id was completed on today.

        Args:
            task_id: Catalog task id. Unknown ids are credited the default XP.
            today: Calendar day of the completion

        Returns:
            The new record, or None if the task was already completed that day
        """
        key = (task_id, today)
        if key in self._records:
            logger.debug("Task %s already completed on %s", task_id, today)
            return None

        if task_id not in self._catalog:
            logger.warning(
                "Unknown task id, crediting default XP",
                extra={"task_id": task_id, "default_xp": self._default_xp},
            )

        record = CompletionRecord(task_id=task_id, date=today, xp_awarded=self.xp_for_task(task_id))
        self._records[key] = record
        logger.info(
            "Recorded completion",
            extra={"task_id": task_id, "date": today.isoformat(), "xp": record.xp_awarded},
        )

        self._bus.publish(XPChanged(delta=record.xp_awarded, task_id=task_id, on_date=today))
        if self.is_day_complete(today):
            logger.info("All tasks completed", extra={"date": today.isoformat()})
            self._bus.publish(DayCompleted(on_date=today))

        return record

    def undo_completion(self, task_id: str, today: date) -> CompletionRecord | None:
        """Remove the completion of task_id on today.

        The XP reversal uses the stored ``xp_awarded`` snapshot, not the
        current catalog value.

        Returns:
            The removed record, or None if there was nothing to undo
        """
        record = self._records.pop((task_id, today), None)
        if record is None:
            logger.debug("No completion of %s on %s to undo", task_id, today)
            return None

        logger.info(
            "Undid completion",
            extra={"task_id": task_id, "date": today.isoformat(), "xp": record.xp_awarded},
        )
        self._bus.publish(XPChanged(delta=-record.xp_awarded, task_id=task_id, on_date=today))
        return record

    def is_completed(self, task_id: str, on_date: date) -> bool:
        return (task_id, on_date) in self._records

    def completions_for_date(self, on_date: date) -> list[CompletionRecord]:
        return [record for record in self._records.values() if record.date == on_date]

    def is_day_complete(self, on_date: date) -> bool:
        """True when every catalog task has a record for on_date."""
        if len(self._catalog) == 0:
            return False
        return all((task_id, on_date) in self._records for task_id in self._catalog.task_ids)

    def completion_percentage(self, on_date: date) -> float:
        """Share of the catalog completed on on_date, 0-100 (0 for an empty catalog)."""
        catalog_size = len(self._catalog)
        if catalog_size == 0:
            return 0.0
        return len(self.completions_for_date(on_date)) / catalog_size * 100

    def total_xp_for_date(self, on_date: date) -> int:
        return sum(record.xp_awarded for record in self.completions_for_date(on_date))

    def to_snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(completions=list(self._records.values()))

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Replace all records with those in snapshot. Publishes no events."""
        self._records = {(record.task_id, record.date): record for record in snapshot.completions}
        logger.debug("Restored %d completion records", len(self._records))

    def clear(self) -> None:
        self._records.clear()
