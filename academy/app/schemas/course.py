"""Course schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CourseBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    status: Literal["active", "archived"] = "active"
    hourly_rate: Optional[Decimal] = Field(default=None, gt=0)


class CourseCreate(CourseBase):
    pass


class CourseUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[Literal["active", "archived"]] = None
    hourly_rate: Optional[Decimal] = Field(default=None, gt=0)

    @field_validator("name", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class CourseRead(CourseBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
