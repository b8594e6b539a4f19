"""
Final grade computation.

The total score blends the unit average with the two main exam papers:

    total = average * 0.30 + theory * 0.35 + practical * 0.35

and the enrollment passes when ``total >= passing_threshold``. Arithmetic is
done in Decimal so a score that lands exactly on the threshold is a Pass
regardless of binary float rounding.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from app.core.exceptions import InvalidMark
from app.models.enrollment_models import FinalGrade

UNIT_AVERAGE_WEIGHT = Decimal("0.30")
THEORY_WEIGHT = Decimal("0.35")
PRACTICAL_WEIGHT = Decimal("0.35")

MIN_MARK = 0
MAX_MARK = 100


@dataclass(frozen=True)
class GradeResult:
    total_score: float
    final_grade: FinalGrade


class _Incomplete:
    """Grading cannot finalize yet: at least one input is missing."""

    _instance: Optional["_Incomplete"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "INCOMPLETE"


INCOMPLETE = _Incomplete()


def validate_exam_mark(value, field_name: str = "exam mark") -> Optional[int]:
    """Return the mark as an int, or None when empty. Raises InvalidMark."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    if isinstance(value, bool):
        raise InvalidMark(f"Invalid {field_name}: {value!r}. Must be 0-100 or empty.")
    try:
        mark = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidMark(
            f"Invalid {field_name}: {value!r}. Must be 0-100 or empty.",
            details={"field": field_name, "value": value},
        )
    if isinstance(value, float) and value != mark:
        raise InvalidMark(
            f"Invalid {field_name}: {value!r}. Must be a whole number.",
            details={"field": field_name, "value": value},
        )
    if mark < MIN_MARK or mark > MAX_MARK:
        raise InvalidMark(
            f"Invalid {field_name}: {mark}. Must be 0-100 or empty.",
            details={"field": field_name, "value": mark},
        )
    return mark


def _as_decimal(value: Union[int, float]) -> Decimal:
    return Decimal(str(value))


def compute_final_grade(
    average: Optional[float],
    theory: Optional[int],
    practical: Optional[int],
    passing_threshold: int,
) -> Union[GradeResult, _Incomplete]:
    if average is None or theory is None or practical is None:
        return INCOMPLETE

    total = (
        _as_decimal(average) * UNIT_AVERAGE_WEIGHT
        + _as_decimal(theory) * THEORY_WEIGHT
        + _as_decimal(practical) * PRACTICAL_WEIGHT
    )
    grade = FinalGrade.PASS if total >= _as_decimal(passing_threshold) else FinalGrade.FAIL
    return GradeResult(total_score=float(total), final_grade=grade)
