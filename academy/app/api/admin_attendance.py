"""Admin attendance override endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from academy.app.core.errors import ValidationFailed
from academy.app.core.security import get_current_admin
from academy.app.db.session import get_db
from academy.app.models.attendance import AttendanceRecord
from academy.app.models.user import User
from academy.app.schemas.attendance import AdminAttendanceMarkRequest, AttendanceRead
from academy.app.services.attendance import admin_mark_attendance, remove_attendance

router = APIRouter(prefix="/admin/attendance", tags=["admin-attendance"])


@router.get("/", response_model=list[AttendanceRead])
async def list_attendance(
    session_id: int | None = None,
    coach_id: int | None = None,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    query = db.query(AttendanceRecord)
    if session_id is not None:
        query = query.filter(AttendanceRecord.session_id == session_id)
    if coach_id is not None:
        query = query.filter(AttendanceRecord.coach_id == coach_id)
    return query.order_by(AttendanceRecord.attendance_timestamp.desc()).all()


@router.post("/mark")
async def mark_attendance_as_admin(
    payload: AdminAttendanceMarkRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    record, created = admin_mark_attendance(db, current_admin, payload.session_id, payload.coach_id, payload.status)
    body = {
        "success": True,
        "updated": not created,
        "attendance": AttendanceRead.model_validate(record).model_dump(mode="json"),
    }
    return JSONResponse(status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK, content=body)


@router.delete("/mark")
async def delete_attendance(
    attendance_id: int | None = None,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    if attendance_id is None:
        raise ValidationFailed("attendance_id is required")
    deleted = remove_attendance(db, current_admin, attendance_id)
    return {"success": True, "deleted": deleted}
