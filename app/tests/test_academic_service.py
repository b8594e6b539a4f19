import pytest

from app.core.exceptions import InvalidMark, ResourceNotFound
from app.models.enrollment_models import Enrollment
from app.services import academic_service
from app.services.academic_service import save_academic_marks
from app.services.course_service import get_unit_catalog
from app.services.unit_marks_service import get_marks_by_unit


def _reload(db, enrollment_id):
    db.expire_all()
    return db.get(Enrollment, enrollment_id)


def _all_units(db, course, value):
    return {u.id: value for u in get_unit_catalog(db, course.id)}


def test_worked_example_seven_units_then_eighth(db, enrollment, course, admin):
    catalog = get_unit_catalog(db, course.id)
    first_seven = {u.id: 70 for u in catalog[:7]}

    result = save_academic_marks(db, enrollment.id, first_seven, theory=80, practical=60,
                                 passing_threshold=60, admin=admin)

    assert result.units_complete is False
    assert result.average_unit_marks is None
    assert result.final_grade is None
    row = _reload(db, enrollment.id)
    assert row.average_unit_marks is None
    assert row.final_grade is None
    assert row.main_exam_theory_marks == 80
    assert row.main_exam_practical_marks == 60

    result = save_academic_marks(db, enrollment.id, {catalog[7].id: 70}, theory=80, practical=60,
                                 passing_threshold=60, admin=admin)

    assert result.units_complete is True
    assert result.average_unit_marks == pytest.approx(70.0)
    assert result.total_score == pytest.approx(70.0)
    assert result.final_grade == "Pass"
    row = _reload(db, enrollment.id)
    assert row.average_unit_marks == pytest.approx(70.0)
    assert row.final_grade == "Pass"


def test_failing_grade_is_stored(db, enrollment, course):
    result = save_academic_marks(db, enrollment.id, _all_units(db, course, 40), theory=40, practical=40,
                                 passing_threshold=60)

    assert result.final_grade == "Fail"
    assert _reload(db, enrollment.id).final_grade == "Fail"


def test_missing_exam_clears_grade(db, enrollment, course):
    save_academic_marks(db, enrollment.id, _all_units(db, course, 90), theory=90, practical=90)
    assert _reload(db, enrollment.id).final_grade == "Pass"

    result = save_academic_marks(db, enrollment.id, {}, theory=90, practical=None)

    assert result.final_grade is None
    row = _reload(db, enrollment.id)
    assert row.final_grade is None
    assert row.main_exam_practical_marks is None
    # unit average is still complete
    assert row.average_unit_marks == pytest.approx(90.0)


def test_resaving_incomplete_stays_cleared(db, enrollment, course):
    catalog = get_unit_catalog(db, course.id)
    save_academic_marks(db, enrollment.id, {catalog[0].id: 50}, theory=70, practical=70)
    save_academic_marks(db, enrollment.id, {}, theory=70, practical=70)

    row = _reload(db, enrollment.id)
    assert row.final_grade is None
    assert row.average_unit_marks is None


def test_clearing_a_unit_clears_grade(db, enrollment, course):
    catalog = get_unit_catalog(db, course.id)
    save_academic_marks(db, enrollment.id, _all_units(db, course, 75), theory=75, practical=75)

    result = save_academic_marks(db, enrollment.id, {catalog[3].id: ""}, theory=75, practical=75)

    assert result.units_complete is False
    row = _reload(db, enrollment.id)
    assert row.final_grade is None
    assert row.average_unit_marks is None
    assert catalog[3].id not in get_marks_by_unit(db, enrollment.id)


def test_string_inputs_from_forms(db, enrollment, course):
    marks = {str(u.id): "65" for u in get_unit_catalog(db, course.id)}

    result = save_academic_marks(db, enrollment.id, marks, theory="65", practical=" 65 ")

    assert result.average_unit_marks == pytest.approx(65.0)
    assert result.final_grade == "Pass"


def test_invalid_unit_mark_aborts_everything(db, enrollment, course):
    catalog = get_unit_catalog(db, course.id)
    save_academic_marks(db, enrollment.id, _all_units(db, course, 70), theory=80, practical=60)
    before = get_marks_by_unit(db, enrollment.id)

    bad = {catalog[0].id: 10, catalog[1].id: 150}
    with pytest.raises(InvalidMark):
        save_academic_marks(db, enrollment.id, bad, theory=20, practical=20)

    row = _reload(db, enrollment.id)
    assert get_marks_by_unit(db, enrollment.id) == before
    assert row.main_exam_theory_marks == 80
    assert row.final_grade == "Pass"


@pytest.mark.parametrize("theory, practical", [(101, 50), (50, -1), ("abc", 50), (50, 12.5)])
def test_invalid_exam_mark_aborts(db, enrollment, course, theory, practical):
    catalog = get_unit_catalog(db, course.id)

    with pytest.raises(InvalidMark):
        save_academic_marks(db, enrollment.id, {catalog[0].id: 55}, theory=theory, practical=practical)

    row = _reload(db, enrollment.id)
    assert get_marks_by_unit(db, enrollment.id) == {}
    assert row.main_exam_theory_marks is None
    assert row.main_exam_practical_marks is None


def test_unit_from_another_course_is_rejected(db, enrollment, make_course):
    other = make_course(unit_count=2)

    with pytest.raises(InvalidMark):
        save_academic_marks(db, enrollment.id, {other.units[0].id: 50}, theory=50, practical=50)

    assert get_marks_by_unit(db, enrollment.id) == {}


def test_unknown_enrollment(db):
    with pytest.raises(ResourceNotFound):
        save_academic_marks(db, 999, {}, theory=50, practical=50)


def test_failure_mid_transaction_rolls_back(db, enrollment, course, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("grade engine unavailable")

    monkeypatch.setattr(academic_service, "compute_final_grade", boom)

    with pytest.raises(RuntimeError):
        save_academic_marks(db, enrollment.id, _all_units(db, course, 70), theory=70, practical=70)

    row = _reload(db, enrollment.id)
    assert get_marks_by_unit(db, enrollment.id) == {}
    assert row.main_exam_theory_marks is None
    assert row.final_grade is None


def test_changing_threshold_does_not_regrade_stored_rows(db, enrollment, course):
    save_academic_marks(db, enrollment.id, _all_units(db, course, 65), theory=65, practical=65,
                        passing_threshold=60)

    # the stored grade only moves on the next save
    assert _reload(db, enrollment.id).final_grade == "Pass"

    result = save_academic_marks(db, enrollment.id, {}, theory=65, practical=65, passing_threshold=70)
    assert result.final_grade == "Fail"
    assert _reload(db, enrollment.id).final_grade == "Fail"


def test_threshold_defaults_to_settings(db, enrollment, course, monkeypatch):
    monkeypatch.setattr(academic_service.settings, "PASSING_GRADE", 80)

    result = save_academic_marks(db, enrollment.id, _all_units(db, course, 75), theory=75, practical=75)

    assert result.final_grade == "Fail"
