from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.core.exceptions import TwoemError
from app.db.database import get_db
from app.models.student_models import Student
from app.schemas.backend_schemas.student_schemas import (
    StudentDetailResponse,
    StudentEnrollmentSummary,
    StudentRegisterSchema,
    StudentResponse,
    StudentUpdateSchema,
)
from app.services.dependencies import AdminIdentity, get_current_admin
from app.services.fee_service import get_fee_totals
from app.services.registration_service import register_student
from app.services.student_service import reset_student_password, toggle_student_status, update_student
from app.utils.logger import logger


router = APIRouter(prefix="/admin/students", tags=["Admin Students"])


@router.post("/", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentRegisterSchema,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        student = register_student(
            db,
            first_name=payload.first_name,
            second_name=payload.second_name,
            last_name=payload.last_name,
            email=str(payload.email),
            phone_number=payload.phone_number,
            admin=admin,
        )
    except TwoemError as e:
        logger.warning("Student registration failed: %s", e.message)
        raise to_http_exception(e)

    return student


@router.get("/", response_model=List[StudentResponse])
def list_students(
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    return db.query(Student).order_by(desc(Student.created_at), desc(Student.id)).all()


@router.get("/{student_id}", response_model=StudentDetailResponse)
def get_student_detail(
    student_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    student = db.get(Student, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    totals = get_fee_totals(db, student_id)
    enrollments = sorted(student.enrollments, key=lambda e: e.course.name)

    return StudentDetailResponse(
        student=StudentResponse.model_validate(student),
        enrollments=[
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
        ],
        total_charged=totals.total_charged,
        total_paid=totals.total_paid,
        overall_balance=totals.balance,
    )


@router.put("/{student_id}", response_model=StudentResponse)
def edit_student(
    student_id: int,
    payload: StudentUpdateSchema,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        return update_student(
            db,
            student_id,
            first_name=payload.first_name,
            second_name=payload.second_name,
            last_name=payload.last_name,
            email=str(payload.email),
            phone_number=payload.phone_number,
            admin=admin,
        )
    except TwoemError as e:
        raise to_http_exception(e)


@router.post("/{student_id}/toggle-status", response_model=StudentResponse)
def toggle_status(
    student_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        return toggle_student_status(db, student_id, admin)
    except TwoemError as e:
        raise to_http_exception(e)


@router.post("/{student_id}/reset-password", response_model=StudentResponse)
def reset_password(
    student_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        return reset_student_password(db, student_id, admin)
    except TwoemError as e:
        logger.warning("Password reset for student %s failed: %s", student_id, e.message)
        raise to_http_exception(e)
