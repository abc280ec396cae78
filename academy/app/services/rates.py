"""Hourly rate resolution and session pay computation.

A session's rate is resolved once, when it is logged or edited, using the
first rule that applies:

1. the coach's latest course rate with ``effective_from <= session_date``;
2. a category override matched against the course name;
3. the course's flat ``hourly_rate``.

If none applies the write is rejected with :class:`RateNotFoundError`.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from academy.app.core.errors import NotFound, RateNotFoundError, ValidationFailed
from academy.app.core.settings import Settings, get_settings
from academy.app.core.time import minutes_of_day
from academy.app.models.coach_course_rate import CoachCourseRate
from academy.app.models.course import Course

logger = logging.getLogger(__name__)

SOURCE_COACH_RATE = "coach_rate"
SOURCE_CATEGORY_OVERRIDE = "category_override"
SOURCE_COURSE_DEFAULT = "course_default"


@dataclass(frozen=True)
class CategoryOverrideRule:
    """Fixed rate for courses whose name contains any of ``tokens`` (case-insensitive)."""

    tokens: tuple
    rate: Decimal

    def matches(self, course_name: Optional[str]) -> bool:
        if not course_name:
            return False
        name = course_name.lower()
        return any(token.lower() in name for token in self.tokens)


@dataclass(frozen=True)
class ResolvedRate:
    rate: Decimal
    source: str


@dataclass(frozen=True)
class SessionPay:
    computed_hours: Decimal
    applied_rate: Decimal
    rate_source: str
    subtotal: Decimal


def category_override_rules(settings: Optional[Settings] = None) -> list[CategoryOverrideRule]:
    settings = settings or get_settings()
    if not settings.category_override_tokens:
        return []
    return [CategoryOverrideRule(tuple(settings.category_override_tokens), Decimal(str(settings.category_override_rate)))]


def round_to(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to ``places`` decimals."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def choose_rate(
    historical: Optional[CoachCourseRate],
    course: Course,
    rules: Sequence[CategoryOverrideRule],
) -> ResolvedRate:
    if historical is not None and historical.rate is not None and Decimal(str(historical.rate)) > 0:
        return ResolvedRate(Decimal(str(historical.rate)), SOURCE_COACH_RATE)

    for rule in rules:
        if rule.matches(course.name):
            return ResolvedRate(rule.rate, SOURCE_CATEGORY_OVERRIDE)

    if course.hourly_rate is not None and Decimal(str(course.hourly_rate)) > 0:
        return ResolvedRate(Decimal(str(course.hourly_rate)), SOURCE_COURSE_DEFAULT)

    raise RateNotFoundError(course_id=course.id)


def resolve_rate(
    db: Session,
    course_id: int,
    coach_id: int,
    session_date: date,
    rules: Optional[Sequence[CategoryOverrideRule]] = None,
) -> ResolvedRate:
    course = db.query(Course).filter(Course.id == course_id).first()
    if course is None:
        raise NotFound("Course not found")

    historical = (
        db.query(CoachCourseRate)
        .filter(
            CoachCourseRate.course_id == course_id,
            CoachCourseRate.coach_id == coach_id,
            CoachCourseRate.effective_from <= session_date,
        )
        .order_by(CoachCourseRate.effective_from.desc(), CoachCourseRate.id.desc())
        .first()
    )
    try:
        resolved = choose_rate(historical, course, category_override_rules() if rules is None else rules)
    except RateNotFoundError:
        logger.info("No rate configured for course=%s coach=%s date=%s", course_id, coach_id, session_date)
        raise
    logger.debug(
        "Resolved rate %s (%s) for course=%s coach=%s date=%s",
        resolved.rate,
        resolved.source,
        course_id,
        coach_id,
        session_date,
    )
    return resolved


def validate_time_range(start_time: time, end_time: time) -> None:
    if end_time <= start_time:
        raise ValidationFailed("End time must be after start time.")


def compute_hours(start_time: time, end_time: time, places: Optional[int] = None) -> Decimal:
    validate_time_range(start_time, end_time)
    places = get_settings().hours_precision if places is None else places
    minutes = minutes_of_day(end_time) - minutes_of_day(start_time)
    return round_to(Decimal(minutes) / Decimal(60), places)


def compute_subtotal(computed_hours: Decimal, applied_rate: Decimal, places: Optional[int] = None) -> Decimal:
    places = get_settings().money_precision if places is None else places
    return round_to(Decimal(str(computed_hours)) * Decimal(str(applied_rate)), places)


def price_session(
    db: Session,
    course_id: int,
    coach_id: int,
    session_date: date,
    start_time: time,
    end_time: time,
) -> SessionPay:
    """Validate the time range, resolve the rate, and compute the frozen pay fields."""
    validate_time_range(start_time, end_time)
    resolved = resolve_rate(db, course_id, coach_id, session_date)
    hours = compute_hours(start_time, end_time)
    return SessionPay(
        computed_hours=hours,
        applied_rate=resolved.rate,
        rate_source=resolved.source,
        subtotal=compute_subtotal(hours, resolved.rate),
    )
