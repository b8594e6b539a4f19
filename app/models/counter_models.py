from sqlalchemy import Column, Integer, String

from app.db.database import Base

STUDENT_REG_SUFFIX = "student_reg_suffix"


class AppCounter(Base):
    __tablename__ = "app_counters"

    counter_name = Column(String, primary_key=True)
    current_value = Column(Integer, nullable=False, default=0)
