"""Session schemas."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class SessionBase(BaseModel):
    course_id: int
    session_date: date
    start_time: time
    end_time: time
    session_type: Literal["online_session", "offline_meeting"] = "online_session"
    notes: Optional[str] = None
    attendance_required: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def _truncate_to_minutes(cls, value: time) -> time:
        return value.replace(second=0, microsecond=0, tzinfo=None)


class SessionCreate(SessionBase):
    paid_coach_id: Optional[int] = None
    originally_scheduled_coach_id: Optional[int] = None


class SessionUpdate(BaseModel):
    course_id: Optional[int] = None
    paid_coach_id: Optional[int] = None
    originally_scheduled_coach_id: Optional[int] = None
    session_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    session_type: Optional[Literal["online_session", "offline_meeting"]] = None
    notes: Optional[str] = None
    attendance_required: Optional[bool] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _truncate_to_minutes(cls, value: Optional[time]) -> Optional[time]:
        if value is None:
            return value
        return value.replace(second=0, microsecond=0, tzinfo=None)


class SessionRead(SessionBase):
    id: int
    paid_coach_id: int
    originally_scheduled_coach_id: Optional[int] = None
    computed_hours: Decimal
    applied_rate: Decimal
    rate_source: str
    subtotal: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
