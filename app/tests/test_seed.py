from app.db.seed import seed_defaults
from app.models.counter_models import STUDENT_REG_SUFFIX, AppCounter
from app.models.course_models import Course
from app.services.course_service import DEFAULT_COURSE_NAME, DEFAULT_COURSE_UNITS, get_unit_catalog
from app.services.registration_service import allocate_registration_number


def test_seed_defaults_is_idempotent(db):
    seed_defaults(db)
    seed_defaults(db)

    courses = db.query(Course).filter(Course.name == DEFAULT_COURSE_NAME).all()
    assert len(courses) == 1
    assert [u.unit_name for u in get_unit_catalog(db, courses[0].id)] == DEFAULT_COURSE_UNITS
    assert db.get(AppCounter, STUDENT_REG_SUFFIX).current_value == 0


def test_seeded_counter_starts_at_one(db):
    seed_defaults(db)
    assert allocate_registration_number(db) == "TWOEM001"
