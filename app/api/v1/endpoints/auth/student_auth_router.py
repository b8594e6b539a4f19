from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.student_models import Student
from app.schemas.backend_schemas.student_schemas import StudentLoginSchema, TokenResponse
from app.services.dependencies import create_access_token
from app.utils.hashing import verify_password
from app.utils.logger import logger


router = APIRouter(prefix="/students", tags=["Student Auth"])


@router.post("/login", response_model=TokenResponse)
def login_student(payload: StudentLoginSchema, db: Session = Depends(get_db)):
    student = (
        db.query(Student)
        .filter(Student.registration_number == payload.registration_number)
        .first()
    )

    if not student or not verify_password(payload.password, student.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid registration number or password.",
        )

    if not student.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    student.last_login_at = datetime.utcnow()
    db.commit()

    token = create_access_token({
        "role": "student",
        "registration_number": student.registration_number,
    })
    logger.info("Student %s logged in", student.registration_number)

    return TokenResponse(
        access_token=token,
        requires_password_change=student.requires_password_change,
        is_profile_complete=student.is_profile_complete,
    )
