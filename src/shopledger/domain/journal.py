"""Workflow journal: intent records for multi-step workflows.

The ledger store has no cross-table transactions, so each workflow writes
a journal entry before its first write, records every step that commits,
and finally marks itself completed or failed. A failure after at least one
committed step surfaces as ``PartialWriteError`` and leaves a failed entry
listing exactly what was written.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterator, Optional

from shopledger.database.base import Database
from shopledger.domain.entities import WorkflowEntry, WorkflowStatus
from shopledger.domain.errors import (
    NotFoundError,
    PartialWriteError,
    journal_entry_not_found,
)

logger = logging.getLogger(__name__)


def json_safe(value: Any) -> Any:
    """Make a payload value storable in the JSON journal column."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


@dataclass
class StepResult:
    """Filled in by a step body to record the entity it created."""

    entity_id: Optional[int] = None


class WorkflowJournal:
    """Tracks the committed steps of one running workflow."""

    def __init__(self, db: Database, operation: str, journal_id: int):
        self.db = db
        self.operation = operation
        self.journal_id = journal_id
        self.completed_steps: list[str] = []
        self.entity_id: Optional[int] = None

    @classmethod
    def begin(cls, db: Database, operation: str, payload: dict[str, Any]) -> "WorkflowJournal":
        """Write the intent record and return a journal for the workflow."""
        journal_id = db.create_journal_entry(operation, json_safe(payload))
        return cls(db, operation, journal_id)

    @contextmanager
    def step(self, name: str) -> Iterator[StepResult]:
        """Run one write of the workflow.

        If the body raises before any step has committed, the original
        exception propagates unchanged. Otherwise it is wrapped in
        PartialWriteError. Once the body returns its write counts as
        committed, even if recording it in the journal then fails.
        """
        result = StepResult()
        try:
            yield result
        except Exception as exc:
            self._mark_failed(name, exc)
            if not self.completed_steps:
                raise
            raise self._partial_write(name, exc) from exc

        self.completed_steps.append(name)
        if result.entity_id is not None and self.entity_id is None:
            self.entity_id = result.entity_id

        try:
            self.db.record_journal_step(self.journal_id, name, result.entity_id)
        except Exception as exc:
            failed = f"{name} (journal record)"
            self._mark_failed(failed, exc)
            raise self._partial_write(failed, exc) from exc

    def _partial_write(self, failed_step: str, exc: Exception) -> PartialWriteError:
        logger.error(
            "%s partially applied (journal %s): completed %s, failed at %s: %s",
            self.operation,
            self.journal_id,
            self.completed_steps,
            failed_step,
            exc,
        )
        return PartialWriteError(
            operation=self.operation,
            journal_id=self.journal_id,
            completed_steps=self.completed_steps,
            failed_step=failed_step,
            entity_id=self.entity_id,
        )

    def complete(self) -> None:
        """Mark the workflow completed."""
        self.db.finish_journal_entry(self.journal_id, WorkflowStatus.COMPLETED)
        logger.info(
            "%s completed (journal %s, %d steps)",
            self.operation,
            self.journal_id,
            len(self.completed_steps),
        )

    def _mark_failed(self, step: str, exc: Exception) -> None:
        try:
            self.db.finish_journal_entry(
                self.journal_id, WorkflowStatus.FAILED, error=f"{step}: {exc}"
            )
        except Exception:
            # The entry stays pending, which list_incomplete still reports
            logger.exception(
                "Could not mark journal entry %s as failed", self.journal_id
            )


class JournalService:
    """Read access to workflow journal entries for reconciliation."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_entry(self, journal_id: int) -> WorkflowEntry:
        """Get a journal entry.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        entry = self.db.get_journal_entry(journal_id)
        if entry is None:
            raise NotFoundError(journal_entry_not_found(journal_id))
        return entry

    def list_incomplete(self) -> list[WorkflowEntry]:
        """List workflows that failed or never finished, newest first."""
        return self.db.list_journal_entries(
            statuses=[WorkflowStatus.PENDING, WorkflowStatus.FAILED]
        )

    def list_entries(self, status: Optional[WorkflowStatus] = None) -> list[WorkflowEntry]:
        """List journal entries, optionally filtered by status."""
        if status is None:
            return self.db.list_journal_entries()
        return self.db.list_journal_entries(statuses=[status])
