from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.database import get_db
from app.models.student_models import Student
from app.schemas.backend_schemas.password_update_schemas import PasswordUpdateIn
from app.services.dependencies import get_current_student
from app.utils.hashing import get_password_hash, verify_password
from app.utils.logger import logger


router = APIRouter(prefix="/update-password", tags=["Update Password"])


def _change_password(student: Student, payload: PasswordUpdateIn, db: Session):
    if payload.new_password != payload.confirm_new_password:
        raise HTTPException(status_code=400, detail="New passwords do not match")

    if not student.password_hash:
        raise HTTPException(status_code=400, detail="Password not set")

    if not verify_password(payload.current_password, student.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password incorrect",
        )

    if settings.DEFAULT_STUDENT_PASSWORD and payload.new_password == settings.DEFAULT_STUDENT_PASSWORD:
        raise HTTPException(status_code=400, detail="New password cannot be the default password")

    student.password_hash = get_password_hash(payload.new_password)
    student.requires_password_change = False

    db.commit()
    logger.info("Student %s changed password", student.registration_number)


@router.put("/students", status_code=status.HTTP_200_OK)
def update_student_password(
    payload: PasswordUpdateIn,
    db: Session = Depends(get_db),
    student: Student = Depends(get_current_student),
):
    _change_password(student, payload, db)
    return {"message": "Password updated successfully"}
