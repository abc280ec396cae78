"""Attendance schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class AttendanceMarkRequest(BaseModel):
    session_id: int
    # Range checks happen in the verifier so they map to "Invalid coordinates"
    latitude: float
    longitude: float


class AttendanceMarkResponse(BaseModel):
    id: int
    distance: float
    timestamp: datetime


class AdminAttendanceMarkRequest(BaseModel):
    session_id: int
    coach_id: int
    status: str = "present"


class AttendanceRead(BaseModel):
    id: int
    coach_id: int
    session_id: int
    latitude: float
    longitude: float
    distance_from_academy: float
    attendance_timestamp: datetime
    status: Literal["present", "late", "absent", "excused"]
    marked_by_admin: bool

    model_config = ConfigDict(from_attributes=True)


class AcademyLocationRead(BaseModel):
    latitude: float
    longitude: float
    radius: float
