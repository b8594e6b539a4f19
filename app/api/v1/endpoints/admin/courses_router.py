from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from app.api.errors import to_http_exception
from app.core.exceptions import TwoemError
from app.db.database import get_db
from app.models.course_models import Course
from app.schemas.backend_schemas.course_schemas import (
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    EnrollmentCreate,
    EnrollmentResponse,
    UnitResponse,
)
from app.services.course_service import (
    delete_course,
    get_course_or_404,
    get_unit_catalog,
    provision_course,
    update_course,
)
from app.services.dependencies import AdminIdentity, get_current_admin
from app.services.enrollment_service import enroll_student, remove_enrollment
from app.utils.logger import logger


router = APIRouter(prefix="/admin", tags=["Admin Courses & Enrollments"])


@router.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        course = provision_course(db, payload.name, payload.description, payload.unit_names)
    except TwoemError as e:
        raise to_http_exception(e)
    logger.info("Admin %s created course %s (id=%s)", admin.name, course.name, course.id)
    return course


@router.get("/courses", response_model=List[CourseResponse])
def list_courses(
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    return (
        db.query(Course)
        .options(selectinload(Course.units))
        .order_by(Course.name.asc())
        .all()
    )


@router.get("/courses/{course_id}/units", response_model=List[UnitResponse])
def list_course_units(
    course_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        get_course_or_404(db, course_id)
    except TwoemError as e:
        raise to_http_exception(e)
    return get_unit_catalog(db, course_id)


@router.post(
    "/students/{student_id}/enrollments",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_enrollment(
    student_id: int,
    payload: EnrollmentCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        return enroll_student(db, student_id, payload.course_id)
    except TwoemError as e:
        raise to_http_exception(e)


@router.delete("/enrollments/{enrollment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_enrollment(
    enrollment_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        remove_enrollment(db, enrollment_id)
    except TwoemError as e:
        raise to_http_exception(e)
    logger.info("Admin %s removed enrollment %s", admin.name, enrollment_id)


@router.put("/courses/{course_id}", response_model=CourseResponse)
def edit_course(
    course_id: int,
    payload: CourseUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        course = update_course(db, course_id, payload.name, payload.description)
    except TwoemError as e:
        raise to_http_exception(e)
    logger.info("Admin %s updated course %s (id=%s)", admin.name, course.name, course.id)
    return course


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_course(
    course_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        delete_course(db, course_id)
    except TwoemError as e:
        logger.warning("Course %s not deleted: %s", course_id, e.message)
        raise to_http_exception(e)
    logger.info("Admin %s deleted course %s", admin.name, course_id)
