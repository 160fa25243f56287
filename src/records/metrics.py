"""Derived metrics: total, average and letter grade.

The three values are always recomputed together and in order
(total, then average, then grade) after any score change.
Use ``refresh_metrics`` unless you need one step on its own.
"""

from src.database.models import Grade, StudentRecord

SUBJECT_COUNT = len(StudentRecord.SUBJECTS)

# Lower bound (inclusive) of each tier, highest first
GRADE_THRESHOLDS: tuple[tuple[float, Grade], ...] = (
    (90, Grade.A),
    (80, Grade.B),
    (70, Grade.C),
    (60, Grade.D),
)


def compute_total(record: StudentRecord) -> int:
    """Sum the four subject scores and store the result on the record."""
    record.total = sum(record.scores)
    return record.total


def compute_average(record: StudentRecord) -> float:
    """Store ``total / 4.0`` on the record. Requires ``total`` to be current."""
    record.average = record.total / float(SUBJECT_COUNT)
    return record.average


def grade_for(average: float) -> Grade:
    """Look up the letter grade for an average."""
    for lower_bound, grade in GRADE_THRESHOLDS:
        if average >= lower_bound:
            return grade
    return Grade.F


def compute_grade(record: StudentRecord) -> Grade:
    """Store the letter grade for the record's average. Requires ``average`` to be current."""
    record.grade = grade_for(record.average)
    return record.grade


def refresh_metrics(record: StudentRecord) -> StudentRecord:
    compute_total(record)
    compute_average(record)
    compute_grade(record)
    return record
