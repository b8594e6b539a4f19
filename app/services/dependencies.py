import jwt
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from jwt.exceptions import InvalidTokenError

from fastapi import Depends, status, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.database import get_db
from app.models.student_models import Student


# HTTPBearer for extracting Bearer token from Authorization header
http_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminIdentity:
    id: str
    name: str
    email: str | None = None


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()

    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access",
    })

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str, credentials_exception: HTTPException) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except InvalidTokenError:
        raise credentials_exception


def _get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None,
    credentials_exception: HTTPException
) -> str:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise credentials_exception
    token = credentials.credentials
    if not token:
        raise credentials_exception
    return token


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_access_payload(credentials: HTTPAuthorizationCredentials | None, role: str) -> dict:
    credentials_exception = _credentials_exception()

    token = _get_bearer_token(credentials, credentials_exception)
    payload = verify_access_token(token, credentials_exception)

    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Access token required")

    if payload.get("role") != role:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")

    return payload


def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> AdminIdentity:
    payload = _decode_access_payload(credentials, "admin")

    admin_id = payload.get("admin_id")
    if not admin_id:
        raise _credentials_exception()

    return AdminIdentity(
        id=str(admin_id),
        name=payload.get("admin_name") or str(admin_id),
        email=payload.get("email"),
    )


def get_current_student(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    db: Session = Depends(get_db)
) -> Student:
    payload = _decode_access_payload(credentials, "student")

    registration_number = payload.get("registration_number")
    if not registration_number:
        raise _credentials_exception()

    student = (
        db.query(Student)
        .filter(Student.registration_number == registration_number)
        .first()
    )
    if not student:
        raise _credentials_exception()

    if not student.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    return student
