from datetime import date, time
from decimal import Decimal

import pytest

from academy.app.core.errors import NotFound, RateNotFoundError, ValidationFailed
from academy.app.db.base import Base
from academy.app.db.session import SessionLocal, engine
from academy.app.models.coach_course_rate import CoachCourseRate
from academy.app.models.course import Course
from academy.app.models.user import User
from academy.app.services.rates import (
    CategoryOverrideRule,
    compute_hours,
    compute_subtotal,
    price_session,
    resolve_rate,
)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _coach(db, email="coach@example.com"):
    coach = User(email=email, hashed_password="x", role="coach")
    db.add(coach)
    db.commit()
    db.refresh(coach)
    return coach


def _course(db, name="Python Basics", hourly_rate=None):
    course = Course(name=name, hourly_rate=hourly_rate)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def _rate(db, course, coach, rate, effective_from):
    db.add(CoachCourseRate(course_id=course.id, coach_id=coach.id, rate=Decimal(rate), effective_from=effective_from))
    db.commit()


def test_latest_rate_on_or_before_session_date_wins(db):
    coach = _coach(db)
    course = _course(db, hourly_rate=Decimal("50"))
    _rate(db, course, coach, "100", date(2024, 1, 1))
    _rate(db, course, coach, "120", date(2024, 3, 1))
    _rate(db, course, coach, "150", date(2024, 6, 1))

    assert resolve_rate(db, course.id, coach.id, date(2024, 2, 15)).rate == Decimal("100")
    resolved = resolve_rate(db, course.id, coach.id, date(2024, 3, 1))
    assert resolved.rate == Decimal("120")
    assert resolved.source == "coach_rate"
    assert resolve_rate(db, course.id, coach.id, date(2025, 1, 1)).rate == Decimal("150")


def test_future_rates_fall_back_to_course_default(db):
    coach = _coach(db)
    course = _course(db, hourly_rate=Decimal("80"))
    _rate(db, course, coach, "200", date(2030, 1, 1))

    resolved = resolve_rate(db, course.id, coach.id, date(2024, 3, 1))
    assert resolved.rate == Decimal("80")
    assert resolved.source == "course_default"


def test_rates_of_other_coaches_are_ignored(db):
    coach = _coach(db)
    other = _coach(db, "other@example.com")
    course = _course(db, hourly_rate=Decimal("80"))
    _rate(db, course, other, "300", date(2020, 1, 1))

    assert resolve_rate(db, course.id, coach.id, date(2024, 3, 1)).source == "course_default"


@pytest.mark.parametrize("name", ["Advanced Competetion Prep", "COMPETITION team", "Junior competition"])
def test_competition_courses_use_override_over_course_default(db, name):
    coach = _coach(db)
    course = _course(db, name=name, hourly_rate=Decimal("200"))

    resolved = resolve_rate(db, course.id, coach.id, date(2024, 3, 1))
    assert resolved.rate == Decimal("75")
    assert resolved.source == "category_override"


def test_misspelled_competition_course_without_any_rate(db):
    coach = _coach(db)
    course = _course(db, name="Advanced Competetion Prep")

    resolved = resolve_rate(db, course.id, coach.id, date(2024, 3, 1))
    assert (resolved.rate, resolved.source) == (Decimal("75"), "category_override")


def test_coach_rate_beats_category_override(db):
    coach = _coach(db)
    course = _course(db, name="Competition Squad")
    _rate(db, course, coach, "90", date(2024, 1, 1))

    resolved = resolve_rate(db, course.id, coach.id, date(2024, 3, 1))
    assert (resolved.rate, resolved.source) == (Decimal("90"), "coach_rate")


def test_custom_override_rules(db):
    coach = _coach(db)
    course = _course(db, name="Summer Camp", hourly_rate=Decimal("60"))
    rules = [CategoryOverrideRule(("camp",), Decimal("40"))]

    resolved = resolve_rate(db, course.id, coach.id, date(2024, 7, 1), rules=rules)
    assert (resolved.rate, resolved.source) == (Decimal("40"), "category_override")


def test_no_rate_anywhere_raises(db):
    coach = _coach(db)
    course = _course(db)

    with pytest.raises(RateNotFoundError):
        resolve_rate(db, course.id, coach.id, date(2024, 3, 1))


def test_missing_course_is_not_found(db):
    coach = _coach(db)
    with pytest.raises(NotFound):
        resolve_rate(db, 999, coach.id, date(2024, 3, 1))


def test_hours_and_subtotal():
    hours = compute_hours(time(9, 0), time(10, 30))
    assert hours == Decimal("1.50")
    assert compute_subtotal(hours, Decimal("200")) == Decimal("300.00")


def test_hours_round_half_up():
    # 10 minutes is 0.1666.. hours
    assert compute_hours(time(9, 0), time(9, 10)) == Decimal("0.17")
    assert compute_subtotal(Decimal("0.17"), Decimal("75")) == Decimal("12.75")
    assert compute_subtotal(Decimal("0.33"), Decimal("12.50")) == Decimal("4.13")


def test_pay_is_deterministic():
    first = compute_subtotal(compute_hours(time(14, 5), time(16, 47)), Decimal("87.5"))
    second = compute_subtotal(compute_hours(time(14, 5), time(16, 47)), Decimal("87.5"))
    assert first == second


@pytest.mark.parametrize("start, end", [(time(10, 0), time(10, 0)), (time(11, 0), time(10, 0))])
def test_end_must_be_after_start_before_any_lookup(db, start, end):
    # Course 999 does not exist; the time check fires first
    with pytest.raises(ValidationFailed):
        price_session(db, 999, 1, date(2024, 3, 1), start, end)


def test_price_session_freezes_all_fields(db):
    coach = _coach(db)
    course = _course(db)
    _rate(db, course, coach, "200", date(2024, 1, 1))

    pay = price_session(db, course.id, coach.id, date(2024, 3, 1), time(9, 0), time(10, 30))
    assert pay.computed_hours == Decimal("1.50")
    assert pay.applied_rate == Decimal("200")
    assert pay.rate_source == "coach_rate"
    assert pay.subtotal == Decimal("300.00")
