"""Coach attendance verification.

Coaches mark attendance with their device coordinates; the distance to the
academy is always recomputed here and checked against the configured radius.
Admins can record or correct attendance without any location check.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.app.core.errors import (
    DuplicateForToday,
    Forbidden,
    InvalidCoordinates,
    NotAssigned,
    NotFound,
    TooFar,
    ValidationFailed,
)
from academy.app.core.settings import AcademyLocation, get_settings
from academy.app.core.time import day_window, local_date, utc_now
from academy.app.models.attendance import ADMIN_MARK_STATUSES, AttendanceRecord
from academy.app.models.session import Session as SessionModel
from academy.app.models.user import User
from academy.app.services.geo import is_within_academy, validate_coordinates

logger = logging.getLogger(__name__)


def _get_session(db: Session, session_id: int) -> SessionModel:
    session_obj = db.query(SessionModel).filter(SessionModel.id == session_id).first()
    if session_obj is None:
        raise NotFound("Session not found")
    return session_obj


def find_attendance_for_day(db: Session, coach_id: int, session_id: int, moment: datetime) -> Optional[AttendanceRecord]:
    start, end = day_window(moment)
    return (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.coach_id == coach_id,
            AttendanceRecord.session_id == session_id,
            AttendanceRecord.attendance_timestamp >= start,
            AttendanceRecord.attendance_timestamp <= end,
        )
        .first()
    )


def mark_attendance(
    db: Session,
    coach: User,
    session_id: int,
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None,
    location: Optional[AcademyLocation] = None,
) -> AttendanceRecord:
    if not validate_coordinates(latitude, longitude):
        raise InvalidCoordinates()
    if coach is None or not coach.is_coach:
        raise Forbidden("Forbidden - Only coaches can mark attendance")

    session_obj = _get_session(db, session_id)
    if session_obj.paid_coach_id != coach.id:
        raise NotAssigned()

    location = location or get_settings().academy_location()
    within, distance = is_within_academy(location, latitude, longitude)
    if not within:
        logger.info(
            "Attendance rejected for coach=%s session=%s: %.2fm from academy (max %sm)",
            coach.id,
            session_id,
            distance,
            location.radius_meters,
        )
        raise TooFar(distance=distance, max_distance=location.radius_meters)

    now = now or utc_now()
    if find_attendance_for_day(db, coach.id, session_id, now) is not None:
        logger.info("Duplicate attendance for coach=%s session=%s", coach.id, session_id)
        raise DuplicateForToday()

    record = AttendanceRecord(
        coach_id=coach.id,
        session_id=session_id,
        latitude=latitude,
        longitude=longitude,
        distance_from_academy=distance,
        attendance_timestamp=now,
        attendance_day=local_date(now),
        status="present",
        marked_by_admin=False,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent submission for the same day won the unique constraint
        db.rollback()
        logger.info("Concurrent duplicate attendance for coach=%s session=%s", coach.id, session_id)
        raise DuplicateForToday()
    db.refresh(record)
    logger.info("Attendance marked for coach=%s session=%s at %.2fm", coach.id, session_id, distance)
    return record


def admin_mark_attendance(
    db: Session,
    admin: User,
    session_id: int,
    coach_id: int,
    status: str = "present",
    now: Optional[datetime] = None,
) -> tuple[AttendanceRecord, bool]:
    """Create or correct a coach's attendance for a session. Returns ``(record, created)``."""
    if admin is None or not admin.is_admin:
        raise Forbidden("Forbidden - admin only")
    if status not in ADMIN_MARK_STATUSES:
        raise ValidationFailed('status must be "present" or "excused"')

    _get_session(db, session_id)
    if db.query(User).filter(User.id == coach_id).first() is None:
        raise NotFound("Coach not found")

    existing = (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.session_id == session_id, AttendanceRecord.coach_id == coach_id)
        .order_by(AttendanceRecord.attendance_timestamp.desc())
        .first()
    )
    if existing is not None:
        existing.status = status
        existing.marked_by_admin = True
        db.commit()
        db.refresh(existing)
        logger.info("Admin %s set attendance %s to %s", admin.id, existing.id, status)
        return existing, False

    now = now or utc_now()
    # Override records carry no location signal
    record = AttendanceRecord(
        coach_id=coach_id,
        session_id=session_id,
        latitude=0.0,
        longitude=0.0,
        distance_from_academy=0.0,
        attendance_timestamp=now,
        attendance_day=local_date(now),
        status=status,
        marked_by_admin=True,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Admin %s marked coach=%s session=%s as %s", admin.id, coach_id, session_id, status)
    return record, True


def remove_attendance(db: Session, admin: User, attendance_id: int) -> bool:
    if admin is None or not admin.is_admin:
        raise Forbidden("Forbidden - admin only")
    record = db.query(AttendanceRecord).filter(AttendanceRecord.id == attendance_id).first()
    if record is None:
        return False
    db.delete(record)
    db.commit()
    logger.info("Admin %s removed attendance %s", admin.id, attendance_id)
    return True


def attendance_history(db: Session, coach_id: int, session_id: int) -> list[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.coach_id == coach_id, AttendanceRecord.session_id == session_id)
        .order_by(AttendanceRecord.attendance_timestamp.desc())
        .all()
    )
