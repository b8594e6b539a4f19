import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    Float,
    String,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from app.db.database import Base


class FinalGrade(str, enum.Enum):
    PASS = "Pass"
    FAIL = "Fail"


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    student_id = Column(
        Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    enrollment_date = Column(DateTime, default=datetime.utcnow, nullable=False)

    average_unit_marks = Column(Float, nullable=True)
    main_exam_theory_marks = Column(Integer, nullable=True)
    main_exam_practical_marks = Column(Integer, nullable=True)
    final_grade = Column(String, nullable=True)  # 'Pass' / 'Fail'

    certificate_issued_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    student = relationship("Student", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    unit_marks = relationship(
        "StudentUnitMark",
        back_populates="enrollment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollments_student_course"),
        CheckConstraint(
            "main_exam_theory_marks IS NULL OR (main_exam_theory_marks BETWEEN 0 AND 100)",
            name="ck_enrollments_theory_range",
        ),
        CheckConstraint(
            "main_exam_practical_marks IS NULL OR (main_exam_practical_marks BETWEEN 0 AND 100)",
            name="ck_enrollments_practical_range",
        ),
        CheckConstraint(
            "final_grade IS NULL OR final_grade IN ('Pass','Fail')",
            name="ck_enrollments_final_grade",
        ),
        CheckConstraint(
            "final_grade IS NULL OR ("
            "average_unit_marks IS NOT NULL "
            "AND main_exam_theory_marks IS NOT NULL "
            "AND main_exam_practical_marks IS NOT NULL)",
            name="ck_enrollments_grade_inputs_present",
        ),
        Index("ix_enrollments_student", "student_id"),
    )
