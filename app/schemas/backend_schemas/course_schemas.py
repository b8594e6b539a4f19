from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CourseCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=120)
    description: Optional[str] = None
    unit_names: List[str] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str):
        cleaned = value.strip()
        if len(cleaned) < 3:
            raise ValueError("Course name must be at least 3 characters long.")
        return cleaned

    @field_validator("unit_names")
    @classmethod
    def validate_units_unique(cls, v: List[str]):
        cleaned = [u.strip() for u in v]
        if any(not u for u in cleaned):
            raise ValueError("unit names cannot be empty")
        if len({u.lower() for u in cleaned}) != len(cleaned):
            raise ValueError("unit names must be unique within a course")
        return cleaned


class CourseUpdate(BaseModel):
    name: str = Field(..., min_length=3, max_length=120)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str):
        cleaned = value.strip()
        if len(cleaned) < 3:
            raise ValueError("Course name must be at least 3 characters long.")
        return cleaned


class UnitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    unit_name: str
    description: Optional[str] = None


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    units: List[UnitResponse] = []
    created_at: Optional[datetime] = None


class EnrollmentCreate(BaseModel):
    course_id: int = Field(..., ge=1)


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    enrollment_date: Optional[datetime] = None
    average_unit_marks: Optional[float] = None
    main_exam_theory_marks: Optional[int] = None
    main_exam_practical_marks: Optional[int] = None
    final_grade: Optional[str] = None
    certificate_issued_at: Optional[datetime] = None
