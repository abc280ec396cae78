"""Payroll adjustment endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.app.core.errors import NotFound
from academy.app.core.security import get_current_admin, get_current_user
from academy.app.db.session import get_db
from academy.app.models.adjustment import Adjustment
from academy.app.models.user import User
from academy.app.schemas.adjustment import AdjustmentCreate, AdjustmentRead
from academy.app.services.payroll import validate_month

router = APIRouter(prefix="/adjustments", tags=["adjustments"])


@router.post("/", response_model=AdjustmentRead, status_code=status.HTTP_201_CREATED)
async def create_adjustment(
    adjustment_in: AdjustmentCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    if db.query(User).filter(User.id == adjustment_in.coach_id).first() is None:
        raise NotFound("Coach not found")
    adjustment = Adjustment(**adjustment_in.model_dump(), created_by=current_admin.id)
    db.add(adjustment)
    db.commit()
    db.refresh(adjustment)
    return adjustment


@router.get("/", response_model=list[AdjustmentRead])
async def list_adjustments(
    month: str | None = None,
    coach_id: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Adjustment)
    if not current_user.is_admin:
        coach_id = current_user.id
    if coach_id is not None:
        query = query.filter(Adjustment.coach_id == coach_id)
    if month is not None:
        query = query.filter(Adjustment.month == validate_month(month))
    return query.order_by(Adjustment.month.desc(), Adjustment.id.desc()).all()


@router.delete("/{adjustment_id}")
async def delete_adjustment(adjustment_id: int, db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    adjustment = db.query(Adjustment).filter(Adjustment.id == adjustment_id).first()
    if not adjustment:
        raise NotFound("Adjustment not found")
    db.delete(adjustment)
    db.commit()
    return {"status": "deleted", "id": adjustment_id}
