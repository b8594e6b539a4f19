"""
Student registration numbers.

Numbers look like ``TWOEM001``: a configurable prefix plus the value of the
``student_reg_suffix`` counter, zero padded to three digits. The allocator
reads, checks and bumps the counter inside one unit of work; the unit of
work is injected so the allocator can run against the database or an
in-memory store.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AllocationConflict, ConfigurationError, DuplicateStudent, RegistrationFailed
from app.models.counter_models import AppCounter, STUDENT_REG_SUFFIX
from app.models.student_models import Student
from app.services.student_service import email_in_use
from app.utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

SUFFIX_WIDTH = 3


class CounterUnitOfWork(Protocol):
    """Transactional access to the counter and the registration numbers in use.

    Leaving the context without ``commit()`` must roll back every change.
    """

    def __enter__(self) -> "CounterUnitOfWork": ...

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...

    def read_counter(self, name: str) -> Optional[int]: ...

    def create_counter(self, name: str, value: int = 0) -> None: ...

    def write_counter(self, name: str, value: int, expected: int) -> None:
        """Set the counter to ``value`` only if it still holds ``expected``.

        Raises AllocationConflict when another writer moved it first.
        """

    def registration_number_taken(self, registration_number: str) -> bool: ...

    def commit(self) -> None: ...


class SqlCounterUnitOfWork:
    def __init__(self, db: Session):
        self.db = db
        self._committed = False

    def __enter__(self) -> "SqlCounterUnitOfWork":
        self._committed = False
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None or not self._committed:
            self.db.rollback()
        return None

    def read_counter(self, name: str) -> Optional[int]:
        row = (
            self.db.query(AppCounter)
            .filter(AppCounter.counter_name == name)
            .with_for_update()
            .first()
        )
        return None if row is None else int(row.current_value or 0)

    def create_counter(self, name: str, value: int = 0) -> None:
        self.db.add(AppCounter(counter_name=name, current_value=value))
        self.db.flush()

    def write_counter(self, name: str, value: int, expected: int) -> None:
        # SQLite ignores FOR UPDATE, so the write itself carries the check
        updated = (
            self.db.query(AppCounter)
            .filter(
                AppCounter.counter_name == name,
                AppCounter.current_value == expected,
            )
            .update({AppCounter.current_value: value}, synchronize_session=False)
        )
        if updated != 1:
            raise AllocationConflict(
                f"Counter {name} moved past {expected} before it could be written",
                details={"counter": name, "expected": expected},
            )

    def registration_number_taken(self, registration_number: str) -> bool:
        found = (
            self.db.query(Student.id)
            .filter(Student.registration_number == registration_number)
            .first()
        )
        return found is not None

    def commit(self) -> None:
        self.db.commit()
        self._committed = True


class RegistrationNumberAllocator:
    def __init__(
        self,
        uow_factory: Callable[[], CounterUnitOfWork],
        prefix: Optional[str] = None,
        counter_name: str = STUDENT_REG_SUFFIX,
    ):
        self._uow_factory = uow_factory
        self.prefix = settings.REG_NUMBER_PREFIX if prefix is None else prefix
        self.counter_name = counter_name

    def format(self, suffix: int) -> str:
        return f"{self.prefix}{suffix:0{SUFFIX_WIDTH}d}"

    def allocate(self) -> str:
        try:
            with self._uow_factory() as uow:
                current = uow.read_counter(self.counter_name)
                if current is None:
                    uow.create_counter(self.counter_name, 0)
                    current = 0

                suffix = current + 1
                candidate = self.format(suffix)

                if uow.registration_number_taken(candidate):
                    logger.error(
                        "Generated registration number %s already exists. Counter might be out of sync.",
                        candidate,
                    )
                    raise AllocationConflict(
                        f"Registration number {candidate} is already taken",
                        details={"candidate": candidate},
                    )

                uow.write_counter(self.counter_name, suffix, expected=current)
                uow.commit()
        except (IntegrityError, OperationalError) as e:
            # concurrent writer won the counter row or held the lock
            raise AllocationConflict("Registration counter is busy") from e

        logger.info("Allocated registration number %s", candidate)
        return candidate


def allocate_with_retry(allocator: RegistrationNumberAllocator, max_attempts: Optional[int] = None) -> str:
    attempts = settings.REG_ALLOCATION_MAX_ATTEMPTS if max_attempts is None else max_attempts
    attempts = max(1, attempts)

    last_error: Optional[AllocationConflict] = None
    for attempt in range(1, attempts + 1):
        try:
            return allocator.allocate()
        except AllocationConflict as e:
            last_error = e
            logger.warning(
                "Registration number allocation conflict (attempt %s/%s): %s",
                attempt,
                attempts,
                e.message,
            )

    raise RegistrationFailed(
        "Failed to generate a unique registration number. Please try again.",
        details={"attempts": attempts},
    ) from last_error


def allocate_registration_number(db: Session, max_attempts: Optional[int] = None) -> str:
    allocator = RegistrationNumberAllocator(lambda: SqlCounterUnitOfWork(db))
    return allocate_with_retry(allocator, max_attempts)


def register_student(
    db: Session,
    *,
    first_name: str,
    last_name: Optional[str],
    email: str,
    second_name: Optional[str] = None,
    phone_number: Optional[str] = None,
    admin=None,
) -> Student:
    email_clean = email.strip().lower()

    if email_in_use(db, email_clean):
        raise DuplicateStudent("A student with this email address already exists.")

    default_password = settings.DEFAULT_STUDENT_PASSWORD
    if not default_password:
        raise ConfigurationError("Server configuration error: Default password not set.")

    password_hash = get_password_hash(default_password)
    attempts = max(1, settings.REG_ALLOCATION_MAX_ATTEMPTS)

    last_error: Optional[IntegrityError] = None
    for attempt in range(1, attempts + 1):
        registration_number = allocate_registration_number(db)

        student = Student(
            registration_number=registration_number,
            first_name=first_name.strip(),
            second_name=(second_name or "").strip() or None,
            last_name=(last_name or "").strip() or None,
            email=email_clean,
            phone_number=(phone_number or "").strip() or None,
            password_hash=password_hash,
            requires_password_change=True,
            is_profile_complete=False,
            is_active=True,
            last_updated_by_admin_id=getattr(admin, "id", None),
            last_updated_by_admin_name=getattr(admin, "name", None),
        )

        try:
            db.add(student)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if email_in_use(db, email_clean):
                raise DuplicateStudent("A student with this email address already exists.") from e
            last_error = e
            logger.warning(
                "Registration number %s was taken on insert (attempt %s/%s)",
                registration_number,
                attempt,
                attempts,
            )
            continue
        except Exception:
            db.rollback()
            raise
        break
    else:
        raise RegistrationFailed(
            "Failed to generate a unique registration number. Please try again.",
            details={"attempts": attempts},
        ) from last_error

    db.refresh(student)
    logger.info(
        "Admin %s registered student %s (%s), RegNo: %s",
        getattr(admin, "name", None),
        student.full_name,
        student.email,
        registration_number,
    )
    return student
