from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr, field_validator


def _clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


class StudentRegisterSchema(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=80)
    second_name: Optional[str] = Field(None, max_length=80)
    last_name: str = Field(..., min_length=1, max_length=80)
    email: EmailStr
    phone_number: Optional[str] = Field(None, max_length=30)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name cannot be blank")
        return cleaned

    @field_validator("second_name", "phone_number")
    @classmethod
    def validate_optional(cls, value):
        return _clean_optional(value)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value):
        return str(value).lower()


class StudentUpdateSchema(StudentRegisterSchema):
    """Admin edit of contact details. Same rules as registration."""


class StudentLoginSchema(BaseModel):
    registration_number: str
    password: constr(min_length=3)

    @field_validator("registration_number")
    @classmethod
    def normalize_reg(cls, value: str):
        return value.strip().upper()


class AdminLoginSchema(BaseModel):
    email: EmailStr
    password: constr(min_length=3)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    requires_password_change: Optional[bool] = None
    is_profile_complete: Optional[bool] = None


class StudentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    registration_number: str
    email: EmailStr
    first_name: str
    second_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    requires_password_change: bool
    is_profile_complete: bool
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class StudentEnrollmentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: int
    course_id: int
    course_name: str
    enrollment_date: Optional[datetime] = None
    average_unit_marks: Optional[float] = None
    main_exam_theory_marks: Optional[int] = None
    main_exam_practical_marks: Optional[int] = None
    final_grade: Optional[str] = None
    certificate_issued_at: Optional[datetime] = None


class StudentDetailResponse(BaseModel):
    student: StudentResponse
    enrollments: List[StudentEnrollmentSummary] = []
    total_charged: float
    total_paid: float
    overall_balance: float


class NextOfKinSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    relationship: str = Field(..., min_length=1, max_length=60)
    phone: str = Field(..., min_length=3, max_length=30)
    email: Optional[EmailStr] = None

    @field_validator("name", "relationship", "phone")
    @classmethod
    def validate_required(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name, relationship and phone are required")
        return cleaned


class StudentProfileResponse(StudentResponse):
    next_of_kin_details: Optional[dict] = None
