import pytest

from app.core.exceptions import InvalidMark, ResourceNotFound
from app.models.unit_mark_models import StudentUnitMark
from app.services.course_service import get_unit_catalog
from app.services.unit_marks_service import (
    UNGRADED,
    Graded,
    average_from_marks,
    compute_average,
    get_marks_by_unit,
    parse_mark,
    set_unit_mark,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (70, Graded(70)),
        ("0", Graded(0)),
        (100, Graded(100)),
        (None, UNGRADED),
        ("", UNGRADED),
        ("  ", UNGRADED),
    ],
)
def test_parse_mark(raw, expected):
    assert parse_mark(raw) == expected


@pytest.mark.parametrize("raw", [-5, 101, "seventy", 70.5])
def test_parse_mark_rejects_out_of_range_and_garbage(raw):
    with pytest.raises(InvalidMark):
        parse_mark(raw)


def test_set_unit_mark_upserts_single_row(db, enrollment, course, admin):
    unit = course.units[0]

    set_unit_mark(db, enrollment.id, unit.id, Graded(55), admin)
    set_unit_mark(db, enrollment.id, unit.id, Graded(65), admin)
    db.commit()

    rows = db.query(StudentUnitMark).filter(StudentUnitMark.enrollment_id == enrollment.id).all()
    assert len(rows) == 1
    assert rows[0].marks == 65
    assert rows[0].logged_by_admin_id == admin.id
    assert rows[0].logged_by_admin_name == admin.name


def test_ungraded_deletes_row(db, enrollment, course):
    unit = course.units[0]
    set_unit_mark(db, enrollment.id, unit.id, Graded(40))
    db.commit()

    set_unit_mark(db, enrollment.id, unit.id, UNGRADED)
    db.commit()

    assert get_marks_by_unit(db, enrollment.id) == {}


def test_ungrading_missing_row_is_noop(db, enrollment, course):
    assert set_unit_mark(db, enrollment.id, course.units[0].id, UNGRADED) is None
    assert get_marks_by_unit(db, enrollment.id) == {}


def test_graded_value_is_revalidated(db, enrollment, course):
    with pytest.raises(InvalidMark):
        set_unit_mark(db, enrollment.id, course.units[0].id, Graded(150))


def test_average_requires_every_catalog_unit():
    catalog = [1, 2, 3]

    assert average_from_marks(catalog, {1: 60, 2: 70}).complete is False
    assert average_from_marks(catalog, {1: 60, 2: 70, 3: None}).average is None

    result = average_from_marks(catalog, {1: 60, 2: 70, 3: 80})
    assert result.complete is True
    assert result.average == pytest.approx(70.0)


def test_empty_catalog_is_never_complete():
    result = average_from_marks([], {})
    assert result.complete is False
    assert result.average is None


def test_marks_outside_catalog_are_ignored():
    result = average_from_marks([1, 2], {1: 50, 2: 70, 99: 0})
    assert result.average == pytest.approx(60.0)


def test_zero_counts_as_a_mark():
    result = average_from_marks([1, 2], {1: 0, 2: 0})
    assert result.complete is True
    assert result.average == 0


@pytest.mark.parametrize("missing_index", range(8))
def test_compute_average_incomplete_when_any_unit_missing(db, enrollment, course, missing_index):
    catalog = get_unit_catalog(db, course.id)
    for i, unit in enumerate(catalog):
        if i != missing_index:
            set_unit_mark(db, enrollment.id, unit.id, Graded(70))
    db.commit()

    result = compute_average(db, enrollment.id)
    assert result.complete is False
    assert result.average is None


def test_compute_average_divides_by_catalog_size(db, enrollment, course):
    catalog = get_unit_catalog(db, course.id)
    assert len(catalog) == 8

    for i, unit in enumerate(catalog):
        set_unit_mark(db, enrollment.id, unit.id, Graded(50 if i % 2 else 90))
    db.commit()

    result = compute_average(db, enrollment.id)
    assert result.complete is True
    assert result.average == pytest.approx(70.0)


def test_clearing_a_unit_makes_average_incomplete_again(db, enrollment, course):
    catalog = get_unit_catalog(db, course.id)
    for unit in catalog:
        set_unit_mark(db, enrollment.id, unit.id, Graded(80))
    db.commit()
    assert compute_average(db, enrollment.id).complete is True

    set_unit_mark(db, enrollment.id, catalog[-1].id, UNGRADED)
    db.commit()

    assert compute_average(db, enrollment.id).complete is False


def test_compute_average_unknown_enrollment(db):
    with pytest.raises(ResourceNotFound):
        compute_average(db, 12345)
