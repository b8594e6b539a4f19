from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.db.database import Base


class Fee(Base):
    __tablename__ = "fees"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    student_id = Column(
        Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )

    description = Column(String, nullable=False)  # e.g. "Course Fee - MS Word"
    total_amount = Column(Float, nullable=False, default=0)
    amount_paid = Column(Float, nullable=False, default=0)

    payment_date = Column(DateTime, nullable=True)
    payment_method = Column(String, nullable=True)  # Cash, M-Pesa, Bank Transfer
    notes = Column(Text, nullable=True)

    logged_by_admin_id = Column(String, nullable=True)
    logged_by_admin_name = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    student = relationship("Student", back_populates="fees")


Index("ix_fees_student", Fee.student_id)
