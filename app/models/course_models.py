from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    units = relationship(
        "Unit",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Unit.id",
    )
    enrollments = relationship("Enrollment", back_populates="course")


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    unit_name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    course = relationship("Course", back_populates="units")

    __table_args__ = (
        UniqueConstraint("course_id", "unit_name", name="uq_units_course_name"),
    )
