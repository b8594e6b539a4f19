import os

from pwdlib import PasswordHash

# Settings are read at import time, so the environment must be ready first.
ADMIN_EMAIL = "admin@twoemonline.co.ke"
ADMIN_PASSWORD = "admin-pass-123"
DEFAULT_STUDENT_PASSWORD = "Student@123"

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEFAULT_STUDENT_PASSWORD"] = DEFAULT_STUDENT_PASSWORD
os.environ["PASSING_GRADE"] = "60"
os.environ["ADMIN1_EMAIL"] = ADMIN_EMAIL
os.environ["ADMIN1_NAME"] = "Test Admin"
os.environ["ADMIN1_PASSWORD_HASH"] = PasswordHash.recommended().hash(ADMIN_PASSWORD)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db import base  # noqa: E402,F401
from app.db.database import Base, build_engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.student_models import Student  # noqa: E402
from app.services.course_service import DEFAULT_COURSE_UNITS, provision_course  # noqa: E402
from app.services.dependencies import AdminIdentity, create_access_token  # noqa: E402
from app.services.enrollment_service import enroll_student  # noqa: E402


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_credentials():
    return {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}


@pytest.fixture
def default_student_password():
    return DEFAULT_STUDENT_PASSWORD


@pytest.fixture
def admin():
    return AdminIdentity(id="admin1", name="Test Admin", email=ADMIN_EMAIL)


@pytest.fixture
def admin_headers(admin):
    token = create_access_token({
        "role": "admin",
        "admin_id": admin.id,
        "admin_name": admin.name,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student_headers():
    def _headers(student: Student) -> dict:
        token = create_access_token({
            "role": "student",
            "registration_number": student.registration_number,
        })
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_student(db):
    counter = {"n": 0}

    def _make(email=None, first_name="Jane", last_name="Wanjiku", is_active=True):
        counter["n"] += 1
        n = counter["n"]
        student = Student(
            registration_number=f"TEST{n:03d}",
            email=email or f"student{n}@example.com",
            first_name=first_name,
            last_name=last_name,
            password_hash="not-a-real-hash",
            is_active=is_active,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _make


@pytest.fixture
def course(db):
    return provision_course(db, "Basic Computer Training", None, DEFAULT_COURSE_UNITS)


@pytest.fixture
def make_course(db):
    counter = {"n": 0}

    def _make(unit_count=3):
        counter["n"] += 1
        names = [f"Unit {i}" for i in range(1, unit_count + 1)]
        return provision_course(db, f"Course {counter['n']}", None, names)

    return _make


@pytest.fixture
def student(make_student):
    return make_student()


@pytest.fixture
def enrollment(db, student, course):
    return enroll_student(db, student.id, course.id)
