import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.exceptions import CourseInUse, ResourceNotFound, TwoemError
from app.models.course_models import Course, Unit
from app.models.enrollment_models import Enrollment

logger = logging.getLogger(__name__)

DEFAULT_COURSE_NAME = "Basic Computer Training"
DEFAULT_COURSE_DESCRIPTION = "Foundational computer skills certificate course."
DEFAULT_COURSE_UNITS = [
    "Introduction to Computers",
    "Keyboard Management",
    "Microsoft Word",
    "Microsoft Excel",
    "Microsoft Publisher",
    "Microsoft PowerPoint",
    "Microsoft Access",
    "Internet and Email",
]


def get_course_or_404(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if not course:
        raise ResourceNotFound(f"Course {course_id} not found")
    return course


def get_unit_catalog(db: Session, course_id: int) -> List[Unit]:
    """Gradable units of a course in catalog order."""
    return (
        db.query(Unit)
        .filter(Unit.course_id == course_id)
        .order_by(Unit.id.asc())
        .all()
    )


def _clean_unit_names(unit_names: Sequence[str]) -> List[str]:
    cleaned = []
    seen = set()
    for name in unit_names:
        value = (name or "").strip()
        if not value:
            raise TwoemError("Unit names cannot be empty", error_code="InvalidUnit")
        key = value.lower()
        if key in seen:
            raise TwoemError(
                f"Duplicate unit name in course: {value}", error_code="InvalidUnit"
            )
        seen.add(key)
        cleaned.append(value)
    return cleaned


def provision_course(
    db: Session,
    name: str,
    description: Optional[str],
    unit_names: Sequence[str],
) -> Course:
    """Create a course together with its fixed unit catalog."""
    names = _clean_unit_names(unit_names)

    course = Course(name=name.strip(), description=description)
    course.units = [Unit(unit_name=n) for n in names]

    try:
        db.add(course)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(course)
    logger.info("Provisioned course %s (id=%s) with %s units", course.name, course.id, len(names))
    return course


def ensure_default_course(db: Session) -> Course:
    course = db.query(Course).filter(Course.name == DEFAULT_COURSE_NAME).first()
    if course:
        return course
    return provision_course(db, DEFAULT_COURSE_NAME, DEFAULT_COURSE_DESCRIPTION, DEFAULT_COURSE_UNITS)


def update_course(db: Session, course_id: int, name: str, description: Optional[str]) -> Course:
    """Rename or re-describe a course. The unit catalog is left alone."""
    course = get_course_or_404(db, course_id)
    course.name = name.strip()
    course.description = (description or "").strip() or None

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(course)
    logger.info("Updated course %s (id=%s)", course.name, course.id)
    return course


def delete_course(db: Session, course_id: int) -> None:
    course = get_course_or_404(db, course_id)

    enrolled = db.query(Enrollment.id).filter(Enrollment.course_id == course_id).count()
    if enrolled:
        raise CourseInUse(
            f"Cannot delete course. It has {enrolled} student enrollment(s). Remove them first.",
            details={"enrollments": enrolled},
        )

    try:
        db.delete(course)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted course %s", course_id)
