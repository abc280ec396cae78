"""Monthly payroll totals."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.app.core.security import get_current_user
from academy.app.db.session import get_db
from academy.app.models.user import User
from academy.app.schemas.payroll import MonthlyTotalRead
from academy.app.services.payroll import get_monthly_totals

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.get("/monthly", response_model=list[MonthlyTotalRead])
async def monthly_totals(
    month: str,
    coach_id: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not current_user.is_admin:
        coach_id = current_user.id
    return get_monthly_totals(db, month, coach_id=coach_id)
