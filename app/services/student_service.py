import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConfigurationError, DuplicateStudent, ResourceNotFound
from app.models.student_models import Student
from app.utils.hashing import get_password_hash

logger = logging.getLogger(__name__)


def get_student_or_404(db: Session, student_id: int) -> Student:
    student = db.get(Student, student_id)
    if not student:
        raise ResourceNotFound(f"Student {student_id} not found")
    return student


def email_in_use(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Student.id).filter(Student.email == email)
    if exclude_id is not None:
        query = query.filter(Student.id != exclude_id)
    return query.first() is not None


def _stamp_admin(student: Student, admin) -> None:
    student.last_updated_by_admin_id = getattr(admin, "id", None)
    student.last_updated_by_admin_name = getattr(admin, "name", None)


def _commit(db: Session, student: Student) -> Student:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(student)
    return student


def update_student(
    db: Session,
    student_id: int,
    *,
    first_name: str,
    last_name: str,
    email: str,
    second_name: Optional[str] = None,
    phone_number: Optional[str] = None,
    admin=None,
) -> Student:
    """Replace a student's contact details. The registration number never changes."""
    student = get_student_or_404(db, student_id)
    email_clean = email.strip().lower()

    if email_clean != student.email and email_in_use(db, email_clean, exclude_id=student.id):
        raise DuplicateStudent("This email address is already in use by another student.")

    student.first_name = first_name.strip()
    student.second_name = (second_name or "").strip() or None
    student.last_name = last_name.strip()
    student.email = email_clean
    student.phone_number = (phone_number or "").strip() or None
    _stamp_admin(student, admin)

    _commit(db, student)
    logger.info(
        "Admin %s updated details for student %s (%s)",
        getattr(admin, "name", None),
        student.full_name,
        student.registration_number,
    )
    return student


def toggle_student_status(db: Session, student_id: int, admin=None) -> Student:
    student = get_student_or_404(db, student_id)
    student.is_active = not student.is_active
    _stamp_admin(student, admin)

    _commit(db, student)
    logger.info(
        "Admin %s %s student %s",
        getattr(admin, "name", None),
        "activated" if student.is_active else "deactivated",
        student.registration_number,
    )
    return student


def reset_student_password(db: Session, student_id: int, admin=None) -> Student:
    """Put the default password back and force a change at next login."""
    student = get_student_or_404(db, student_id)

    default_password = settings.DEFAULT_STUDENT_PASSWORD
    if not default_password:
        raise ConfigurationError("Server configuration error: Default student password not defined.")

    student.password_hash = get_password_hash(default_password)
    student.requires_password_change = True
    _stamp_admin(student, admin)

    _commit(db, student)
    logger.info(
        "Admin %s reset password for student %s to default",
        getattr(admin, "name", None),
        student.registration_number,
    )
    return student
