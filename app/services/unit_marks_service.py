from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Mapping, Optional, Union

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidMark, ResourceNotFound
from app.models.enrollment_models import Enrollment
from app.models.unit_mark_models import StudentUnitMark
from app.services.course_service import get_unit_catalog
from app.services.grade_engine import validate_exam_mark


# -----------------------------
# Mark = Graded(int) | Ungraded
# -----------------------------
@dataclass(frozen=True)
class Graded:
    value: int


class _Ungraded:
    _instance: Optional["_Ungraded"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNGRADED"


UNGRADED = _Ungraded()

Mark = Union[Graded, _Ungraded]


@dataclass(frozen=True)
class AverageResult:
    average: Optional[float]
    complete: bool


def parse_mark(raw, label: str = "unit mark") -> Mark:
    """Turn raw form input into a Mark. Empty input means ungraded."""
    if isinstance(raw, (Graded, _Ungraded)):
        return raw
    value = validate_exam_mark(raw, label)
    if value is None:
        return UNGRADED
    return Graded(value)


def set_unit_mark(
    db: Session,
    enrollment_id: int,
    unit_id: int,
    mark: Mark,
    admin=None,
) -> Optional[StudentUnitMark]:
    """Upsert or clear one (enrollment, unit) mark. Does not commit."""
    if isinstance(mark, Graded):
        # re-check: Graded can be built directly without parse_mark
        validate_exam_mark(mark.value, f"mark for unit {unit_id}")

    row = (
        db.query(StudentUnitMark)
        .filter(
            StudentUnitMark.enrollment_id == enrollment_id,
            StudentUnitMark.unit_id == unit_id,
        )
        .first()
    )

    if mark is UNGRADED:
        if row is not None:
            db.delete(row)
            db.flush()
        return None

    admin_id = getattr(admin, "id", None)
    admin_name = getattr(admin, "name", None)

    if row is None:
        row = StudentUnitMark(enrollment_id=enrollment_id, unit_id=unit_id)
        db.add(row)

    row.marks = mark.value
    row.logged_by_admin_id = admin_id
    row.logged_by_admin_name = admin_name
    row.updated_at = datetime.utcnow()
    db.flush()
    return row


def get_marks_by_unit(db: Session, enrollment_id: int) -> Dict[int, Optional[int]]:
    rows = (
        db.query(StudentUnitMark.unit_id, StudentUnitMark.marks)
        .filter(StudentUnitMark.enrollment_id == enrollment_id)
        .all()
    )
    return {unit_id: marks for unit_id, marks in rows}


def average_from_marks(
    catalog_unit_ids: Iterable[int],
    marks_by_unit: Mapping[int, Optional[int]],
) -> AverageResult:
    catalog = list(catalog_unit_ids)
    if not catalog:
        return AverageResult(average=None, complete=False)

    for unit_id in catalog:
        if marks_by_unit.get(unit_id) is None:
            return AverageResult(average=None, complete=False)

    total = sum(marks_by_unit[unit_id] for unit_id in catalog)
    return AverageResult(average=total / len(catalog), complete=True)


def compute_average(db: Session, enrollment_id: int) -> AverageResult:
    enrollment = db.get(Enrollment, enrollment_id)
    if enrollment is None:
        raise ResourceNotFound(f"Enrollment {enrollment_id} not found")

    catalog = get_unit_catalog(db, enrollment.course_id)
    marks = get_marks_by_unit(db, enrollment_id)
    return average_from_marks([u.id for u in catalog], marks)
