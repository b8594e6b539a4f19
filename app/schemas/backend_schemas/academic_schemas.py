from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

# Marks arrive from forms as numbers, numeric strings or "" for "not graded".
# Range checks happen in the grading service so the whole batch is rejected
# in one place.
RawMark = Optional[Union[int, str]]


class AcademicMarksSubmission(BaseModel):
    unit_marks: Dict[int, RawMark] = Field(default_factory=dict)
    main_exam_theory_marks: RawMark = None
    main_exam_practical_marks: RawMark = None


class AcademicMarksResponse(BaseModel):
    enrollment_id: int
    average_unit_marks: Optional[float] = None
    units_complete: bool
    main_exam_theory_marks: Optional[int] = None
    main_exam_practical_marks: Optional[int] = None
    total_score: Optional[float] = None
    final_grade: Optional[str] = None
    grading_status: str


class UnitMarkRow(BaseModel):
    unit_id: int
    unit_name: str
    marks: Optional[int] = None


class MarksSheetResponse(BaseModel):
    enrollment_id: int
    student_id: int
    registration_number: str
    student_name: str
    course_id: int
    course_name: str
    units: List[UnitMarkRow] = []
    average_unit_marks: Optional[float] = None
    main_exam_theory_marks: Optional[int] = None
    main_exam_practical_marks: Optional[int] = None
    final_grade: Optional[str] = None
    passing_grade: int
