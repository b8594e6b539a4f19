from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.db.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    registration_number = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False)

    first_name = Column(String, nullable=False)
    second_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    next_of_kin_details = Column(JSON, nullable=True)

    password_hash = Column(String, nullable=False)

    requires_password_change = Column(Boolean, nullable=False, default=True)
    is_profile_complete = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    last_login_at = Column(DateTime, nullable=True)
    last_updated_by_admin_id = Column(String, nullable=True)
    last_updated_by_admin_name = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    enrollments = relationship(
        "Enrollment",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    fees = relationship(
        "Fee",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.second_name, self.last_name]
        return " ".join(p for p in parts if p)
