import logging

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateEnrollment, ResourceNotFound
from app.models.enrollment_models import Enrollment
from app.models.student_models import Student
from app.services.course_service import get_course_or_404

logger = logging.getLogger(__name__)


def get_enrollment_or_404(db: Session, enrollment_id: int) -> Enrollment:
    enrollment = db.get(Enrollment, enrollment_id)
    if not enrollment:
        raise ResourceNotFound(f"Enrollment {enrollment_id} not found")
    return enrollment


def get_student_enrollment_or_404(db: Session, enrollment_id: int, student_id: int) -> Enrollment:
    enrollment = (
        db.query(Enrollment)
        .filter(
            Enrollment.id == enrollment_id,
            Enrollment.student_id == student_id,
        )
        .first()
    )
    if not enrollment:
        raise ResourceNotFound(f"Enrollment {enrollment_id} not found")
    return enrollment


def enroll_student(db: Session, student_id: int, course_id: int) -> Enrollment:
    student = db.get(Student, student_id)
    if not student:
        raise ResourceNotFound(f"Student {student_id} not found")
    course = get_course_or_404(db, course_id)

    exists = (
        db.query(Enrollment.id)
        .filter(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )
        .first()
    )
    if exists:
        raise DuplicateEnrollment(
            f"Student {student.registration_number} is already enrolled in {course.name}"
        )

    enrollment = Enrollment(student_id=student_id, course_id=course_id)
    try:
        db.add(enrollment)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(enrollment)
    logger.info("Enrolled student %s in course %s", student.registration_number, course.name)
    return enrollment


def remove_enrollment(db: Session, enrollment_id: int) -> None:
    enrollment = get_enrollment_or_404(db, enrollment_id)
    try:
        db.delete(enrollment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Removed enrollment %s", enrollment_id)
