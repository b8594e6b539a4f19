from sqlalchemy.orm import Session

from app.models.counter_models import AppCounter, STUDENT_REG_SUFFIX
from app.services.course_service import ensure_default_course
from app.utils.logger import logger


def ensure_counters(db: Session) -> None:
    if db.get(AppCounter, STUDENT_REG_SUFFIX) is not None:
        return
    db.add(AppCounter(counter_name=STUDENT_REG_SUFFIX, current_value=0))
    db.commit()
    logger.info("Seeded counter %s", STUDENT_REG_SUFFIX)


def seed_defaults(db: Session) -> None:
    """Idempotent bootstrap data: default course catalog and the reg number counter."""
    ensure_default_course(db)
    ensure_counters(db)
