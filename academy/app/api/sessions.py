"""Session logging endpoints.

Pay fields (``computed_hours``, ``applied_rate``, ``subtotal``) are resolved when
a session is created or edited and stored on the row; reads never recompute
them.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.app.core.errors import Forbidden, NotAssigned, NotFound, ValidationFailed
from academy.app.core.security import get_current_user
from academy.app.core.time import local_date, month_bounds, utc_now
from academy.app.db.session import get_db
from academy.app.models.course import Course, CourseCoach
from academy.app.models.session import Session as SessionModel
from academy.app.models.user import User
from academy.app.schemas.session import SessionCreate, SessionRead, SessionUpdate
from academy.app.services.payroll import validate_month
from academy.app.services.rates import price_session, validate_time_range

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _in_current_month(value: date) -> bool:
    today = local_date(utc_now())
    return (value.year, value.month) == (today.year, today.month)


def _get_visible_session(db: Session, session_id: int, current_user: User) -> SessionModel:
    query = db.query(SessionModel).filter(SessionModel.id == session_id)
    if not current_user.is_admin:
        query = query.filter(SessionModel.paid_coach_id == current_user.id)
    session_obj = query.first()
    if not session_obj:
        raise NotFound("Session not found")
    return session_obj


def _get_active_course(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFound("Course not found")
    if not course.is_active:
        raise ValidationFailed("Course is archived; new sessions cannot be logged")
    return course


def _get_coach(db: Session, coach_id: int) -> User:
    coach = db.query(User).filter(User.id == coach_id).first()
    if not coach or not coach.is_coach:
        raise NotFound("Coach not found")
    return coach


def _ensure_assigned(db: Session, course_id: int, coach_id: int) -> None:
    link = db.query(CourseCoach).filter(CourseCoach.course_id == course_id, CourseCoach.coach_id == coach_id).first()
    if link is None:
        raise NotAssigned("You are not assigned to this course")


def _ensure_editable(session_obj: SessionModel, current_user: User, new_date: date | None = None) -> None:
    if current_user.is_admin:
        return
    if not _in_current_month(session_obj.session_date) or (new_date is not None and not _in_current_month(new_date)):
        raise Forbidden("Coaches can only change sessions in the current month")


@router.post("/", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(session_in: SessionCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    validate_time_range(session_in.start_time, session_in.end_time)

    if current_user.is_admin:
        if session_in.paid_coach_id is None:
            raise ValidationFailed("paid_coach_id is required")
        paid_coach_id = _get_coach(db, session_in.paid_coach_id).id
        replaced_coach_id = session_in.originally_scheduled_coach_id
        if replaced_coach_id is not None:
            _get_coach(db, replaced_coach_id)
        _get_active_course(db, session_in.course_id)
    else:
        paid_coach_id = current_user.id
        replaced_coach_id = None
        _get_active_course(db, session_in.course_id)
        _ensure_assigned(db, session_in.course_id, current_user.id)

    pay = price_session(
        db,
        session_in.course_id,
        paid_coach_id,
        session_in.session_date,
        session_in.start_time,
        session_in.end_time,
    )
    session_obj = SessionModel(
        course_id=session_in.course_id,
        paid_coach_id=paid_coach_id,
        originally_scheduled_coach_id=replaced_coach_id,
        session_date=session_in.session_date,
        start_time=session_in.start_time,
        end_time=session_in.end_time,
        session_type=session_in.session_type,
        notes=session_in.notes,
        attendance_required=session_in.attendance_required,
        computed_hours=pay.computed_hours,
        applied_rate=pay.applied_rate,
        rate_source=pay.rate_source,
        subtotal=pay.subtotal,
        created_by=current_user.id,
    )
    db.add(session_obj)
    db.commit()
    db.refresh(session_obj)
    logger.info("Session %s logged: %sh x %s (%s)", session_obj.id, pay.computed_hours, pay.applied_rate, pay.rate_source)
    return session_obj


@router.get("/", response_model=list[SessionRead])
async def list_sessions(
    month: str | None = None,
    coach_id: int | None = None,
    course_id: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(SessionModel)
    if not current_user.is_admin:
        coach_id = current_user.id
    if coach_id is not None:
        query = query.filter(SessionModel.paid_coach_id == coach_id)
    if course_id is not None:
        query = query.filter(SessionModel.course_id == course_id)
    if month is not None:
        start, end = month_bounds(validate_month(month))
        query = query.filter(SessionModel.session_date >= start, SessionModel.session_date <= end)
    return query.order_by(SessionModel.session_date.desc(), SessionModel.start_time.desc()).all()


@router.get("/{session_id}", response_model=SessionRead)
async def get_session(session_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_visible_session(db, session_id, current_user)


@router.put("/{session_id}", response_model=SessionRead)
async def update_session(
    session_id: int,
    session_in: SessionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    session_obj = _get_visible_session(db, session_id, current_user)
    changes = session_in.model_dump(exclude_unset=True)
    _ensure_editable(session_obj, current_user, changes.get("session_date"))

    if not current_user.is_admin:
        changes.pop("paid_coach_id", None)
        changes.pop("originally_scheduled_coach_id", None)

    start_time = changes.get("start_time") or session_obj.start_time
    end_time = changes.get("end_time") or session_obj.end_time
    validate_time_range(start_time, end_time)

    course_id = changes.get("course_id") or session_obj.course_id
    paid_coach_id = changes.get("paid_coach_id") or session_obj.paid_coach_id
    if course_id != session_obj.course_id:
        _get_active_course(db, course_id)
        if not current_user.is_admin:
            _ensure_assigned(db, course_id, current_user.id)
    if paid_coach_id != session_obj.paid_coach_id:
        _get_coach(db, paid_coach_id)
    if changes.get("originally_scheduled_coach_id") is not None:
        _get_coach(db, changes["originally_scheduled_coach_id"])

    session_date = changes.get("session_date") or session_obj.session_date
    # Re-resolve against the edited course, coach and date
    pay = price_session(db, course_id, paid_coach_id, session_date, start_time, end_time)

    for field, value in changes.items():
        if value is None and field not in ("notes", "originally_scheduled_coach_id"):
            continue
        setattr(session_obj, field, value)
    session_obj.computed_hours = pay.computed_hours
    session_obj.applied_rate = pay.applied_rate
    session_obj.rate_source = pay.rate_source
    session_obj.subtotal = pay.subtotal
    db.commit()
    db.refresh(session_obj)
    return session_obj


@router.delete("/{session_id}")
async def delete_session(session_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    session_obj = _get_visible_session(db, session_id, current_user)
    _ensure_editable(session_obj, current_user)
    db.delete(session_obj)
    db.commit()
    return {"status": "deleted", "id": session_id}
