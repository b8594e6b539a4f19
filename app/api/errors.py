from fastapi import HTTPException, status

from app.core.exceptions import (
    AllocationConflict,
    ConfigurationError,
    CourseInUse,
    DuplicateEnrollment,
    DuplicateStudent,
    InvalidFeeEntry,
    InvalidMark,
    NotEligible,
    RegistrationFailed,
    ResourceNotFound,
    TwoemError,
)

_STATUS_BY_ERROR = {
    InvalidMark: status.HTTP_422_UNPROCESSABLE_CONTENT,
    InvalidFeeEntry: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ResourceNotFound: status.HTTP_404_NOT_FOUND,
    DuplicateStudent: status.HTTP_409_CONFLICT,
    DuplicateEnrollment: status.HTTP_409_CONFLICT,
    CourseInUse: status.HTTP_409_CONFLICT,
    NotEligible: status.HTTP_403_FORBIDDEN,
    AllocationConflict: status.HTTP_503_SERVICE_UNAVAILABLE,
    RegistrationFailed: status.HTTP_503_SERVICE_UNAVAILABLE,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(err: TwoemError) -> HTTPException:
    code = status.HTTP_400_BAD_REQUEST
    for err_type, mapped in _STATUS_BY_ERROR.items():
        if isinstance(err, err_type):
            code = mapped
            break
    return HTTPException(
        status_code=code,
        detail={"error": err.error_code, "message": err.message, **err.details},
    )
