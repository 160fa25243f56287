"""Pydantic models for roster data."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, ClassVar, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import RowDecodeError


class Grade(str, Enum):
    """Letter grade derived from a student's average."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


def _stored_score(value: Any) -> Any:
    # NULL reads as 0; REAL values left by other writers are truncated toward zero
    if value is None:
        return 0
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return value


class RecordRow(NamedTuple):
    """Row shape handed to callers by searches and listings."""

    sno: str
    name: str
    korean: int
    english: int
    math: int
    science: int
    total: int


class StudentRecord(BaseModel):
    """A student's four subject scores and the metrics derived from them.

    ``total``, ``average`` and ``grade`` are owned by ``src.records.metrics``;
    callers supply only the identity, the name and the raw scores.
    """

    model_config = ConfigDict(validate_assignment=True)

    SUBJECTS: ClassVar[tuple[str, ...]] = ("korean", "english", "math", "science")
    DERIVED: ClassVar[tuple[str, ...]] = ("total", "average", "grade")

    sno: str
    name: str
    korean: int = 0
    english: int = 0
    math: int = 0
    science: int = 0

    # Derived metrics; constructor arguments for these are discarded
    total: int = 0
    average: float = 0.0
    grade: Grade = Field(default=Grade.F)

    def __init__(self, **data: Any) -> None:
        for name in self.DERIVED:
            data.pop(name, None)
        super().__init__(**data)

    @property
    def scores(self) -> tuple[int, int, int, int]:
        return (self.korean, self.english, self.math, self.science)

    def to_row(self) -> RecordRow:
        return RecordRow(
            self.sno,
            self.name,
            self.korean,
            self.english,
            self.math,
            self.science,
            self.total,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> StudentRecord:
        """Build a record from a column-keyed storage row.

        Scores are taken as stored; normalization is the caller's job.
        NULL scores read as 0 and fractional scores are truncated.

        Raises:
            RowDecodeError: If a column holds a value that is not a score
                (e.g. text written by another tool).
        """
        try:
            return cls(
                sno=row["sno"],
                name=row["name"],
                **{subject: _stored_score(row[subject]) for subject in cls.SUBJECTS},
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise RowDecodeError(f"Stored row {row['sno']!r} has unreadable values: {fields}") from e

    def __str__(self) -> str:
        return f"STUDENT: {self.name} (sno: {self.sno})"
