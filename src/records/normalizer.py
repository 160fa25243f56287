"""Clamp raw subject scores into the valid range."""

from src.database.models import StudentRecord

MIN_SCORE = 0
MAX_SCORE = 100


def normalize(raw_score: int) -> int:
    """Clamp a raw score to [MIN_SCORE, MAX_SCORE]."""
    if raw_score < MIN_SCORE:
        return MIN_SCORE
    if raw_score > MAX_SCORE:
        return MAX_SCORE
    return raw_score


def normalize_scores(record: StudentRecord) -> StudentRecord:
    """Clamp each of the record's four subject scores in place.

    Args:
        record: Record whose scores may be out of range

    Returns:
        The same record, for chaining
    """
    for subject in StudentRecord.SUBJECTS:
        setattr(record, subject, normalize(getattr(record, subject)))
    return record
