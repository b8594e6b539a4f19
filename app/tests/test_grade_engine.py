import pytest

from app.core.exceptions import InvalidMark
from app.models.enrollment_models import FinalGrade
from app.services.grade_engine import (
    INCOMPLETE,
    GradeResult,
    compute_final_grade,
    validate_exam_mark,
)


def test_total_score_blends_average_and_exams():
    result = compute_final_grade(70.0, 80, 60, 60)

    assert isinstance(result, GradeResult)
    assert result.total_score == pytest.approx(70.0)
    assert result.final_grade is FinalGrade.PASS


def test_below_threshold_fails():
    result = compute_final_grade(50.0, 50, 50, 60)

    assert result.total_score == pytest.approx(50.0)
    assert result.final_grade is FinalGrade.FAIL


@pytest.mark.parametrize(
    "average, theory, practical, threshold",
    [
        (60.0, 60, 60, 60),
        # 0.3 * 100 + 0.35 * 40 + 0.35 * 60 = 65
        (100.0, 40, 60, 65),
        # 0.3 * 50 + 0.35 * 50 + 0.35 * 50 = 50
        (50.0, 50, 50, 50),
    ],
)
def test_score_equal_to_threshold_passes(average, theory, practical, threshold):
    result = compute_final_grade(average, theory, practical, threshold)
    assert result.final_grade is FinalGrade.PASS


def test_just_under_threshold_fails():
    # 0.3 * 59.9 + 0.35 * 60 + 0.35 * 60 = 59.97
    result = compute_final_grade(59.9, 60, 60, 60)
    assert result.final_grade is FinalGrade.FAIL


def test_fractional_average_is_kept():
    result = compute_final_grade(72.5, 70, 70, 60)
    assert result.total_score == pytest.approx(72.5 * 0.30 + 70 * 0.70)


def test_extremes():
    assert compute_final_grade(0.0, 0, 0, 60).total_score == 0
    assert compute_final_grade(100.0, 100, 100, 60).total_score == pytest.approx(100.0)
    assert compute_final_grade(0.0, 0, 0, 0).final_grade is FinalGrade.PASS


@pytest.mark.parametrize(
    "average, theory, practical",
    [
        (None, 80, 60),
        (70.0, None, 60),
        (70.0, 80, None),
        (None, None, None),
    ],
)
def test_missing_input_is_incomplete(average, theory, practical):
    result = compute_final_grade(average, theory, practical, 60)

    assert result is INCOMPLETE
    assert not result


def test_zero_marks_are_not_missing():
    assert compute_final_grade(0.0, 0, 0, 60) is not INCOMPLETE


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0, 0),
        (100, 100),
        (55, 55),
        ("42", 42),
        (" 7 ", 7),
        (80.0, 80),
        (None, None),
        ("", None),
        ("   ", None),
    ],
)
def test_validate_exam_mark_accepts(raw, expected):
    assert validate_exam_mark(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [-1, 101, "abc", "12.5", 55.5, True, [], "1e3", float("inf"), float("-inf"), float("nan")],
)
def test_validate_exam_mark_rejects(raw):
    with pytest.raises(InvalidMark):
        validate_exam_mark(raw, "theory")


def test_invalid_mark_carries_field_name():
    with pytest.raises(InvalidMark) as exc_info:
        validate_exam_mark(150, "main exam theory marks")

    assert "main exam theory marks" in exc_info.value.message
    assert exc_info.value.error_code == "InvalidMark"
