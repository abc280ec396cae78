from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdjustmentCreate(BaseModel):
    coach_id: int
    month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    type: Literal["bonus", "discount"]
    amount: Decimal = Field(gt=0)
    notes: Optional[str] = None


class AdjustmentRead(AdjustmentCreate):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
