from io import BytesIO
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.core.exceptions import TwoemError
from app.db.database import get_db
from app.models.student_models import Student
from app.schemas.backend_schemas.certificate_schemas import (
    CertificateListResponse,
    CertificateStatusResponse,
)
from app.schemas.backend_schemas.fee_schemas import FeeEntryResponse, FeeLedgerResponse
from app.schemas.backend_schemas.student_schemas import (
    NextOfKinSchema,
    StudentEnrollmentSummary,
    StudentProfileResponse,
)
from app.services.certificate_generator import generate_certificate
from app.services.certificate_service import issue_certificate, list_certificate_status
from app.services.course_service import get_unit_catalog
from app.services.dependencies import get_current_student
from app.services.enrollment_service import get_student_enrollment_or_404
from app.services.fee_service import get_fee_totals, list_fees
from app.services.unit_marks_service import get_marks_by_unit
from app.utils.logger import logger


router = APIRouter(prefix="/students/me", tags=["Student Portal"])


@router.get("/profile", response_model=StudentProfileResponse)
def my_profile(student: Student = Depends(get_current_student)):
    return student


@router.put("/profile", response_model=StudentProfileResponse)
def complete_profile(
    payload: NextOfKinSchema,
    db: Session = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    student.next_of_kin_details = payload.model_dump(mode="json")
    student.is_profile_complete = True
    db.commit()
    db.refresh(student)

    logger.info("Student %s completed profile", student.registration_number)
    return student


@router.get("/academics", response_model=List[StudentEnrollmentSummary])
def my_academics(
    db: Session = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    enrollments = sorted(student.enrollments, key=lambda e: e.course.name)
    return [
        StudentEnrollmentSummary(
            enrollment_id=e.id,
            course_id=e.course_id,
            course_name=e.course.name,
            enrollment_date=e.enrollment_date,
            average_unit_marks=e.average_unit_marks,
            main_exam_theory_marks=e.main_exam_theory_marks,
            main_exam_practical_marks=e.main_exam_practical_marks,
            final_grade=e.final_grade,
            certificate_issued_at=e.certificate_issued_at,
        )
        for e in enrollments
    ]


@router.get("/fees", response_model=FeeLedgerResponse)
def my_fees(
    db: Session = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    totals = get_fee_totals(db, student.id)
    return FeeLedgerResponse(
        student_id=student.id,
        fees=[FeeEntryResponse.model_validate(f) for f in list_fees(db, student.id)],
        total_charged=totals.total_charged,
        total_paid=totals.total_paid,
        balance=totals.balance,
    )


@router.get("/certificates", response_model=CertificateListResponse)
def my_certificates(
    db: Session = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    statuses = list_certificate_status(db, student.id)
    return CertificateListResponse(
        certificates=[CertificateStatusResponse.model_validate(s) for s in statuses]
    )


@router.get("/certificates/{enrollment_id}/download")
def download_certificate(
    enrollment_id: int,
    db: Session = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    try:
        enrollment = get_student_enrollment_or_404(db, enrollment_id, student.id)
        issue = issue_certificate(db, enrollment_id)
    except TwoemError as e:
        logger.info("Certificate download refused for enrollment %s: %s", enrollment_id, e.message)
        raise to_http_exception(e)

    db.refresh(enrollment)
    marks = get_marks_by_unit(db, enrollment.id)
    unit_rows = [(u.unit_name, marks.get(u.id)) for u in get_unit_catalog(db, enrollment.course_id)]

    buffer = BytesIO()
    generate_certificate(
        buffer,
        student_name=student.full_name,
        registration_number=student.registration_number,
        course_name=enrollment.course.name,
        final_grade=enrollment.final_grade,
        issued_at=issue.issued_at,
        unit_marks=unit_rows,
        average_unit_marks=enrollment.average_unit_marks,
        theory_marks=enrollment.main_exam_theory_marks,
        practical_marks=enrollment.main_exam_practical_marks,
    )
    buffer.seek(0)

    filename = f"certificate_{student.registration_number}_{enrollment.id}.pdf"
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
