"""
Batch save of an enrollment's academic record.

One call validates every submitted value, applies the unit mark changes,
recomputes the unit average from the full course catalog, grades the
enrollment and writes the four grading columns, all in a single transaction.
If anything fails the session is rolled back and the enrollment is left
exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import InvalidMark, ResourceNotFound, TwoemError
from app.models.enrollment_models import Enrollment
from app.services.course_service import get_unit_catalog
from app.services.grade_engine import compute_final_grade, validate_exam_mark
from app.services.unit_marks_service import (
    Mark,
    compute_average,
    parse_mark,
    set_unit_mark,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcademicMarksResult:
    enrollment_id: int
    average_unit_marks: Optional[float]
    units_complete: bool
    main_exam_theory_marks: Optional[int]
    main_exam_practical_marks: Optional[int]
    total_score: Optional[float]
    final_grade: Optional[str]


def _parse_unit_marks(unit_marks: Mapping, catalog_ids: set) -> Dict[int, Mark]:
    parsed: Dict[int, Mark] = {}
    for raw_unit_id, raw_mark in (unit_marks or {}).items():
        try:
            unit_id = int(raw_unit_id)
        except (TypeError, ValueError):
            raise InvalidMark(f"Invalid unit id: {raw_unit_id!r}")
        if unit_id not in catalog_ids:
            raise InvalidMark(
                f"Unit {unit_id} is not part of this course",
                details={"unit_id": unit_id},
            )
        parsed[unit_id] = parse_mark(raw_mark, f"mark for unit {unit_id}")
    return parsed


def save_academic_marks(
    db: Session,
    enrollment_id: int,
    unit_marks: Optional[Mapping] = None,
    theory=None,
    practical=None,
    passing_threshold: Optional[int] = None,
    admin=None,
) -> AcademicMarksResult:
    threshold = settings.PASSING_GRADE if passing_threshold is None else passing_threshold

    try:
        enrollment = (
            db.query(Enrollment)
            .filter(Enrollment.id == enrollment_id)
            .with_for_update()
            .first()
        )
        if not enrollment:
            raise ResourceNotFound(f"Enrollment {enrollment_id} not found")

        # validate everything before the first write
        catalog_ids = {u.id for u in get_unit_catalog(db, enrollment.course_id)}
        parsed = _parse_unit_marks(unit_marks, catalog_ids)
        theory_mark = validate_exam_mark(theory, "main exam theory marks")
        practical_mark = validate_exam_mark(practical, "main exam practical marks")

        for unit_id, mark in parsed.items():
            set_unit_mark(db, enrollment_id, unit_id, mark, admin)

        average = compute_average(db, enrollment_id)
        grade = compute_final_grade(average.average, theory_mark, practical_mark, threshold)

        enrollment.average_unit_marks = average.average
        enrollment.main_exam_theory_marks = theory_mark
        enrollment.main_exam_practical_marks = practical_mark
        enrollment.final_grade = grade.final_grade.value if grade else None

        db.commit()
    except TwoemError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("Failed to save academic marks for enrollment %s", enrollment_id)
        raise

    result = AcademicMarksResult(
        enrollment_id=enrollment_id,
        average_unit_marks=average.average,
        units_complete=average.complete,
        main_exam_theory_marks=theory_mark,
        main_exam_practical_marks=practical_mark,
        total_score=grade.total_score if grade else None,
        final_grade=grade.final_grade.value if grade else None,
    )

    logger.info(
        "Admin %s updated marks for enrollment %s: units=%s theory=%s practical=%s avg=%s grade=%s",
        getattr(admin, "name", None),
        enrollment_id,
        {k: getattr(v, "value", None) for k, v in parsed.items()},
        theory_mark,
        practical_mark,
        average.average,
        result.final_grade,
    )
    return result
