import pytest

from app.core.exceptions import NotEligible, ResourceNotFound
from app.models.enrollment_models import Enrollment
from app.services.certificate_service import (
    is_certificate_eligible,
    issue_certificate,
    list_certificate_status,
)
from app.services.enrollment_service import enroll_student
from app.services.fee_service import log_fee_entry


def _set_grade(db, enrollment, grade):
    enrollment.average_unit_marks = 70.0 if grade else None
    enrollment.main_exam_theory_marks = 70 if grade else None
    enrollment.main_exam_practical_marks = 70 if grade else None
    enrollment.final_grade = grade
    db.commit()


def _set_balance(db, student, balance):
    if balance > 0:
        log_fee_entry(db, student.id, description="Tuition", total_amount=balance)
    elif balance < 0:
        log_fee_entry(db, student.id, description="Prepayment", amount_paid=-balance)


@pytest.mark.parametrize(
    "grade, balance, expected",
    [
        ("Pass", -100, True),
        ("Pass", 0, True),
        ("Pass", 0.01, False),
        ("Fail", -100, False),
        ("Fail", 0, False),
        ("Fail", 0.01, False),
        (None, -100, False),
        (None, 0, False),
        (None, 0.01, False),
    ],
)
def test_eligibility_grid(db, student, enrollment, grade, balance, expected):
    _set_grade(db, enrollment, grade)
    _set_balance(db, student, balance)

    assert is_certificate_eligible(db, enrollment.id) is expected


def test_balance_is_recomputed_not_cached(db, student, enrollment):
    _set_grade(db, enrollment, "Pass")
    log_fee_entry(db, student.id, description="Tuition", total_amount=3000)
    assert is_certificate_eligible(db, enrollment.id) is False

    log_fee_entry(db, student.id, description="Payment", amount_paid=3000)
    assert is_certificate_eligible(db, enrollment.id) is True


def test_issue_refused_when_not_eligible(db, student, enrollment):
    _set_grade(db, enrollment, "Pass")
    _set_balance(db, student, 500)

    with pytest.raises(NotEligible):
        issue_certificate(db, enrollment.id)

    db.expire_all()
    assert db.get(Enrollment, enrollment.id).certificate_issued_at is None


def test_first_issue_wins(db, enrollment):
    _set_grade(db, enrollment, "Pass")

    first = issue_certificate(db, enrollment.id)
    second = issue_certificate(db, enrollment.id)

    assert first.already_issued is False
    assert second.already_issued is True
    assert second.issued_at == first.issued_at
    db.expire_all()
    assert db.get(Enrollment, enrollment.id).certificate_issued_at == first.issued_at


def test_issue_unknown_enrollment(db):
    with pytest.raises(ResourceNotFound):
        issue_certificate(db, 777)


def test_list_certificate_status(db, student, enrollment, make_course):
    other = enroll_student(db, student.id, make_course().id)
    _set_grade(db, enrollment, "Pass")
    _set_grade(db, other, "Fail")

    statuses = list_certificate_status(db, student.id)

    assert [s.enrollment_id for s in statuses] == [enrollment.id, other.id]
    assert statuses[0].eligible is True
    assert statuses[0].issued_at is None
    assert statuses[1].eligible is False
    assert statuses[1].final_grade == "Fail"
    assert all(s.fee_balance == 0 for s in statuses)
