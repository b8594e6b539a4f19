from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.core.config import Settings, get_settings
from app.core.exceptions import TwoemError
from app.db.database import get_db
from app.schemas.backend_schemas.academic_schemas import (
    AcademicMarksResponse,
    AcademicMarksSubmission,
    MarksSheetResponse,
    UnitMarkRow,
)
from app.schemas.backend_schemas.certificate_schemas import CertificateStatusResponse
from app.services.academic_service import save_academic_marks
from app.services.certificate_service import is_certificate_eligible
from app.services.course_service import get_unit_catalog
from app.services.dependencies import AdminIdentity, get_current_admin
from app.services.enrollment_service import get_enrollment_or_404
from app.services.fee_service import get_fee_balance
from app.services.unit_marks_service import get_marks_by_unit
from app.utils.logger import logger


router = APIRouter(prefix="/admin/enrollments", tags=["Admin Academics"])


@router.get("/{enrollment_id}/marks", response_model=MarksSheetResponse)
def get_marks_sheet(
    enrollment_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
    config: Settings = Depends(get_settings),
):
    try:
        enrollment = get_enrollment_or_404(db, enrollment_id)
    except TwoemError as e:
        raise to_http_exception(e)

    marks = get_marks_by_unit(db, enrollment_id)
    units = [
        UnitMarkRow(unit_id=u.id, unit_name=u.unit_name, marks=marks.get(u.id))
        for u in get_unit_catalog(db, enrollment.course_id)
    ]

    return MarksSheetResponse(
        enrollment_id=enrollment.id,
        student_id=enrollment.student_id,
        registration_number=enrollment.student.registration_number,
        student_name=enrollment.student.full_name,
        course_id=enrollment.course_id,
        course_name=enrollment.course.name,
        units=units,
        average_unit_marks=enrollment.average_unit_marks,
        main_exam_theory_marks=enrollment.main_exam_theory_marks,
        main_exam_practical_marks=enrollment.main_exam_practical_marks,
        final_grade=enrollment.final_grade,
        passing_grade=config.PASSING_GRADE,
    )


@router.post("/{enrollment_id}/marks", response_model=AcademicMarksResponse)
def save_marks(
    enrollment_id: int,
    payload: AcademicMarksSubmission,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
    config: Settings = Depends(get_settings),
):
    try:
        result = save_academic_marks(
            db,
            enrollment_id,
            unit_marks=payload.unit_marks,
            theory=payload.main_exam_theory_marks,
            practical=payload.main_exam_practical_marks,
            passing_threshold=config.PASSING_GRADE,
            admin=admin,
        )
    except TwoemError as e:
        logger.warning("Marks rejected for enrollment %s: %s", enrollment_id, e.message)
        raise to_http_exception(e)

    return AcademicMarksResponse(
        enrollment_id=result.enrollment_id,
        average_unit_marks=result.average_unit_marks,
        units_complete=result.units_complete,
        main_exam_theory_marks=result.main_exam_theory_marks,
        main_exam_practical_marks=result.main_exam_practical_marks,
        total_score=result.total_score,
        final_grade=result.final_grade,
        grading_status="graded" if result.final_grade else "pending",
    )


@router.get("/{enrollment_id}/certificate", response_model=CertificateStatusResponse)
def get_certificate_eligibility(
    enrollment_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        enrollment = get_enrollment_or_404(db, enrollment_id)
        eligible = is_certificate_eligible(db, enrollment_id)
    except TwoemError as e:
        raise to_http_exception(e)

    return CertificateStatusResponse(
        enrollment_id=enrollment.id,
        course_name=enrollment.course.name,
        final_grade=enrollment.final_grade,
        fee_balance=get_fee_balance(db, enrollment.student_id),
        eligible=eligible,
        issued_at=enrollment.certificate_issued_at,
    )
