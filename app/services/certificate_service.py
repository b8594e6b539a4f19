import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotEligible, ResourceNotFound
from app.models.enrollment_models import Enrollment, FinalGrade
from app.services.fee_service import get_fee_balance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CertificateIssue:
    enrollment_id: int
    issued_at: datetime
    already_issued: bool


@dataclass(frozen=True)
class CertificateStatus:
    enrollment_id: int
    course_name: str
    final_grade: str
    fee_balance: float
    eligible: bool
    issued_at: Optional[datetime] = None


def _eligible(enrollment: Enrollment, db: Session) -> bool:
    if enrollment.final_grade != FinalGrade.PASS.value:
        return False
    return get_fee_balance(db, enrollment.student_id) <= 0


def is_certificate_eligible(db: Session, enrollment_id: int) -> bool:
    enrollment = db.get(Enrollment, enrollment_id)
    if not enrollment:
        raise ResourceNotFound(f"Enrollment {enrollment_id} not found")
    return _eligible(enrollment, db)


def issue_certificate(db: Session, enrollment_id: int) -> CertificateIssue:
    """Stamp certificate_issued_at once; later calls report the first issue."""
    try:
        enrollment = (
            db.query(Enrollment)
            .filter(Enrollment.id == enrollment_id)
            .with_for_update()
            .first()
        )
        if not enrollment:
            raise ResourceNotFound(f"Enrollment {enrollment_id} not found")

        if not _eligible(enrollment, db):
            raise NotEligible(
                "Certificate not available: a Pass grade and a cleared fee balance are required.",
                details={"enrollment_id": enrollment_id, "final_grade": enrollment.final_grade},
            )

        if enrollment.certificate_issued_at is not None:
            issued_at = enrollment.certificate_issued_at
            db.rollback()
            return CertificateIssue(enrollment_id, issued_at, already_issued=True)

        enrollment.certificate_issued_at = datetime.utcnow()
        issued_at = enrollment.certificate_issued_at
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Certificate issued for enrollment %s at %s", enrollment_id, issued_at.isoformat())
    return CertificateIssue(enrollment_id, issued_at, already_issued=False)


def list_certificate_status(db: Session, student_id: int) -> List[CertificateStatus]:
    enrollments = (
        db.query(Enrollment)
        .filter(Enrollment.student_id == student_id)
        .order_by(Enrollment.id.asc())
        .all()
    )
    balance = get_fee_balance(db, student_id)
    return [
        CertificateStatus(
            enrollment_id=e.id,
            course_name=e.course.name,
            final_grade=e.final_grade,
            fee_balance=balance,
            eligible=e.final_grade == FinalGrade.PASS.value and balance <= 0,
            issued_at=e.certificate_issued_at,
        )
        for e in enrollments
    ]
