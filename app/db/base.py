# Import every model module so Base.metadata and the ORM registry know all tables
from app.db.database import Base  # noqa: F401
from app.models import (  # noqa: F401
    student_models,
    course_models,
    enrollment_models,
    unit_mark_models,
    fee_models,
    counter_models,
)
