"""Record cache, derived metrics and queries over the student roster."""

from .cache import RecordCache
from .metrics import compute_average, compute_grade, compute_total, grade_for, refresh_metrics
from .normalizer import MAX_SCORE, MIN_SCORE, normalize, normalize_scores
from .query import ListingError, QueryEngine, SortKey
from .results import OperationResult, Outcome

__all__ = [
    "ListingError",
    "MAX_SCORE",
    "MIN_SCORE",
    "OperationResult",
    "Outcome",
    "QueryEngine",
    "RecordCache",
    "SortKey",
    "compute_average",
    "compute_grade",
    "compute_total",
    "grade_for",
    "normalize",
    "normalize_scores",
    "refresh_metrics",
]
