from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from app.db.database import Base


class StudentUnitMark(Base):
    __tablename__ = "student_unit_marks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    enrollment_id = Column(
        Integer, ForeignKey("enrollments.id", ondelete="CASCADE"), nullable=False
    )
    unit_id = Column(
        Integer, ForeignKey("units.id", ondelete="CASCADE"), nullable=False
    )

    # ungraded units have no row at all
    marks = Column(Integer, nullable=True)

    logged_by_admin_id = Column(String, nullable=True)
    logged_by_admin_name = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    enrollment = relationship("Enrollment", back_populates="unit_marks")
    unit = relationship("Unit")

    __table_args__ = (
        UniqueConstraint(
            "enrollment_id", "unit_id", name="uq_student_unit_marks_enrollment_unit"
        ),
        CheckConstraint(
            "marks IS NULL OR (marks BETWEEN 0 AND 100)",
            name="ck_student_unit_marks_range",
        ),
        Index("ix_student_unit_marks_enrollment", "enrollment_id"),
    )
