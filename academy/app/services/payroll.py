"""Monthly payroll totals per coach, built from frozen session pay fields."""

import re
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from academy.app.core.errors import ValidationFailed
from academy.app.core.time import month_bounds
from academy.app.models.adjustment import Adjustment
from academy.app.models.session import Session as SessionModel
from academy.app.models.user import User

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def validate_month(month: Optional[str]) -> str:
    if not month or not MONTH_PATTERN.match(month):
        raise ValidationFailed("Invalid month format. Expected YYYY-MM")
    return month


def sessions_for_month(db: Session, coach_id: int, month: str) -> list[SessionModel]:
    start, end = month_bounds(validate_month(month))
    return (
        db.query(SessionModel)
        .filter(
            SessionModel.paid_coach_id == coach_id,
            SessionModel.session_date >= start,
            SessionModel.session_date <= end,
        )
        .order_by(SessionModel.session_date.asc(), SessionModel.start_time.asc())
        .all()
    )


def adjustments_for_month(db: Session, coach_id: int, month: str) -> list[Adjustment]:
    return (
        db.query(Adjustment)
        .filter(Adjustment.coach_id == coach_id, Adjustment.month == validate_month(month))
        .order_by(Adjustment.created_at.asc())
        .all()
    )


def get_monthly_totals(db: Session, month: str, coach_id: Optional[int] = None) -> list[dict]:
    """Return one totals row per coach with sessions in ``month``."""
    start, end = month_bounds(validate_month(month))
    session_query = db.query(
        SessionModel.paid_coach_id,
        func.count(SessionModel.id),
        func.coalesce(func.sum(SessionModel.computed_hours), 0),
        func.coalesce(func.sum(SessionModel.subtotal), 0),
    ).filter(SessionModel.session_date >= start, SessionModel.session_date <= end)
    if coach_id is not None:
        session_query = session_query.filter(SessionModel.paid_coach_id == coach_id)
    session_query = session_query.group_by(SessionModel.paid_coach_id)

    adjustment_query = (
        db.query(Adjustment.coach_id, Adjustment.type, func.coalesce(func.sum(Adjustment.amount), 0))
        .filter(Adjustment.month == month)
        .group_by(Adjustment.coach_id, Adjustment.type)
    )
    adjustments: dict[tuple[int, str], Decimal] = {
        (row_coach, row_type): Decimal(str(total)) for row_coach, row_type, total in adjustment_query.all()
    }

    totals = []
    for paid_coach_id, session_count, total_hours, gross_total in session_query.all():
        coach = db.query(User).filter(User.id == paid_coach_id).first()
        gross = Decimal(str(gross_total)).quantize(Decimal("0.01"))
        bonuses = adjustments.get((paid_coach_id, "bonus"), Decimal("0.00")).quantize(Decimal("0.01"))
        discounts = adjustments.get((paid_coach_id, "discount"), Decimal("0.00")).quantize(Decimal("0.01"))
        totals.append(
            {
                "coach_id": paid_coach_id,
                "coach_name": (coach.full_name or coach.email) if coach else None,
                "month": month,
                "session_count": session_count,
                "total_hours": Decimal(str(total_hours)).quantize(Decimal("0.01")),
                "gross_total": gross,
                "total_bonuses": bonuses,
                "total_discounts": discounts,
                "net_total": gross + bonuses - discounts,
            }
        )
    totals.sort(key=lambda row: row["coach_name"] or "")
    return totals
