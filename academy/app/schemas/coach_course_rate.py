"""Coach course rate schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CoachCourseRateBase(BaseModel):
    course_id: int
    coach_id: int
    rate: Decimal = Field(gt=0)
    effective_from: date


class CoachCourseRateCreate(CoachCourseRateBase):
    pass


class CoachCourseRateRead(CoachCourseRateBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResolvedRateRead(BaseModel):
    rate: Decimal
    source: Literal["coach_rate", "course_default", "category_override"]
