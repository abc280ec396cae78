"""Monthly totals and invoice sending schemas."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class MonthlyTotalRead(BaseModel):
    coach_id: int
    coach_name: Optional[str] = None
    month: str
    session_count: int
    total_hours: Decimal
    gross_total: Decimal
    total_bonuses: Decimal
    total_discounts: Decimal
    net_total: Decimal


class InvoiceSendRequest(BaseModel):
    month: str
    coach_id: Optional[int] = None


class InvoiceSendResult(BaseModel):
    coach_id: int
    coach_name: Optional[str] = None
    email: str
    status: str


class InvoiceSendResponse(BaseModel):
    message: str
    emails_sent: List[InvoiceSendResult]
