"""Coach attendance endpoints (GPS path)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.app.core.errors import ValidationFailed
from academy.app.core.security import get_current_coach
from academy.app.core.settings import get_settings
from academy.app.core.time import as_utc
from academy.app.db.session import get_db
from academy.app.models.user import User
from academy.app.schemas.attendance import (
    AcademyLocationRead,
    AttendanceMarkRequest,
    AttendanceMarkResponse,
    AttendanceRead,
)
from academy.app.services.attendance import attendance_history, mark_attendance

router = APIRouter(tags=["attendance"])


@router.get("/attendance/academy", response_model=AcademyLocationRead)
async def get_academy_location():
    # Shared with clients for a courtesy pre-check only; marks are re-verified server-side
    location = get_settings().academy_location()
    return {"latitude": location.latitude, "longitude": location.longitude, "radius": location.radius_meters}


@router.post("/coach/attendance/mark", response_model=AttendanceMarkResponse, status_code=status.HTTP_201_CREATED)
async def mark_coach_attendance(
    payload: AttendanceMarkRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_coach),
):
    record = mark_attendance(db, current_user, payload.session_id, payload.latitude, payload.longitude)
    return {"id": record.id, "distance": record.distance_from_academy, "timestamp": as_utc(record.attendance_timestamp)}


@router.get("/coach/attendance/history", response_model=list[AttendanceRead])
async def get_attendance_history(
    session_id: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_coach),
):
    if session_id is None:
        raise ValidationFailed("session_id is required")
    return attendance_history(db, current_user.id, session_id)
