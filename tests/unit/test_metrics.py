"""Tests for derived metrics (total, average, grade)."""

import pytest

from src.database.models import Grade, StudentRecord
from src.records.metrics import (
    compute_average,
    compute_grade,
    compute_total,
    grade_for,
    refresh_metrics,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def record() -> StudentRecord:
    return StudentRecord(sno="S1", name="Kim", korean=95, english=85, math=100, science=0)


class TestComputeSteps:
    """Tests for the individual computation steps."""

    def test_total_sets_field(self, record: StudentRecord):
        assert compute_total(record) == 280
        assert record.total == 280

    def test_average_uses_current_total(self, record: StudentRecord):
        compute_total(record)
        assert compute_average(record) == 70.0
        assert record.average == 70.0

    def test_average_is_float_division(self):
        record = StudentRecord(sno="S2", name="Lee", korean=90, english=90, math=90, science=91)
        compute_total(record)
        assert compute_average(record) == pytest.approx(90.25)

    def test_grade_uses_current_average(self, record: StudentRecord):
        record.average = 91.0
        assert compute_grade(record) is Grade.A
        assert record.grade is Grade.A


class TestGradeThresholds:
    """Grade tiers are inclusive at their lower bound."""

    @pytest.mark.parametrize(
        "average, expected",
        [
            (100.0, Grade.A),
            (90.0, Grade.A),
            (89.999, Grade.B),
            (80.0, Grade.B),
            (79.999, Grade.C),
            (70.0, Grade.C),
            (69.999, Grade.D),
            (60.0, Grade.D),
            (59.999, Grade.F),
            (0.0, Grade.F),
        ],
    )
    def test_boundaries(self, average: float, expected: Grade):
        assert grade_for(average) is expected


class TestRefreshMetrics:
    """Tests for the combined recomputation."""

    def test_runs_all_steps_in_order(self, record: StudentRecord):
        refresh_metrics(record)
        assert (record.total, record.average, record.grade) == (280, 70.0, Grade.C)

    def test_recomputes_from_scratch_after_score_change(self, record: StudentRecord):
        refresh_metrics(record)
        record.science = 100
        refresh_metrics(record)
        assert record.total == 380
        assert record.average == 95.0
        assert record.grade == "A"
