"""Coach course rate endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.app.core.errors import Forbidden, NotFound
from academy.app.core.security import get_current_admin, get_current_user
from academy.app.db.session import get_db
from academy.app.models.coach_course_rate import CoachCourseRate
from academy.app.models.course import Course
from academy.app.models.user import User
from academy.app.schemas.coach_course_rate import CoachCourseRateCreate, CoachCourseRateRead, ResolvedRateRead
from academy.app.services.rates import resolve_rate

router = APIRouter(prefix="/rates", tags=["rates"])


@router.post("/", response_model=CoachCourseRateRead, status_code=status.HTTP_201_CREATED)
async def create_rate(rate_in: CoachCourseRateCreate, db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    if db.query(Course).filter(Course.id == rate_in.course_id).first() is None:
        raise NotFound("Course not found")
    if db.query(User).filter(User.id == rate_in.coach_id).first() is None:
        raise NotFound("Coach not found")
    # Rates are append-only; a change is a new row with a later effective date
    rate = CoachCourseRate(**rate_in.model_dump(), created_by=current_admin.id)
    db.add(rate)
    db.commit()
    db.refresh(rate)
    return rate


@router.get("/", response_model=list[CoachCourseRateRead])
async def list_rates(
    course_id: int | None = None,
    coach_id: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(CoachCourseRate)
    if not current_user.is_admin:
        coach_id = current_user.id
    if course_id is not None:
        query = query.filter(CoachCourseRate.course_id == course_id)
    if coach_id is not None:
        query = query.filter(CoachCourseRate.coach_id == coach_id)
    return query.order_by(CoachCourseRate.effective_from.desc(), CoachCourseRate.id.desc()).all()


@router.get("/resolve", response_model=ResolvedRateRead)
async def preview_rate(
    course_id: int,
    coach_id: int,
    session_date: date,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not current_user.is_admin and coach_id != current_user.id:
        raise Forbidden("Coaches can only preview their own rate")
    resolved = resolve_rate(db, course_id, coach_id, session_date)
    return {"rate": resolved.rate, "source": resolved.source}
