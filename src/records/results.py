"""Typed outcomes for mutating roster operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.database.models import StudentRecord


class Outcome(Enum):
    OK = "OK"

    # update/delete matched no row
    NOT_FOUND = "NOT_FOUND"

    # insert reported zero rows without raising
    NO_ROWS_AFFECTED = "NO_ROWS_AFFECTED"

    # e.g. duplicate sno on insert
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"

    # connectivity or SQL failure
    STORAGE_FAILURE = "STORAGE_FAILURE"


@dataclass
class OperationResult:
    """Result of an add, update or delete against the record cache.

    Attributes:
        outcome: What happened.
        sno: Identity of the record the operation targeted.
        record: The cached record after a successful add or update.
        affected: Row count reported by storage (0 when the statement never ran).
        detail: Human-readable explanation.
    """

    outcome: Outcome
    sno: str
    record: Optional[StudentRecord] = None
    affected: int = 0
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def succeeded(
        cls,
        sno: str,
        affected: int,
        record: Optional[StudentRecord] = None,
        detail: Optional[str] = None,
    ) -> OperationResult:
        return cls(Outcome.OK, sno, record=record, affected=affected, detail=detail)

    @classmethod
    def failed(cls, outcome: Outcome, sno: str, detail: Optional[str] = None) -> OperationResult:
        if outcome is Outcome.OK:
            raise ValueError("failed() requires a failure outcome")
        return cls(outcome, sno, detail=detail)

    def __str__(self) -> str:
        if self.ok:
            return f"Success: {self.detail or self.sno}"
        return f"Error: {self.outcome.value}: {self.detail or self.sno}"
