"""Handles account registration for the academy back office."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from academy.app.core.security import get_password_hash
from academy.app.db.session import get_db
from academy.app.models.user import ROLE_ADMIN, ROLE_COACH, User
from academy.app.schemas.user import UserCreate, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == user_in.email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    # The first account bootstraps the academy as its admin
    role = ROLE_ADMIN if db.query(User).first() is None else ROLE_COACH
    user = User(
        email=user_in.email,
        full_name=user_in.full_name,
        hashed_password=get_password_hash(user_in.password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
