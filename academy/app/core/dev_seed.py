import os

from sqlalchemy.orm import Session

from academy.app.core.security import get_password_hash
from academy.app.core.settings import get_settings
from academy.app.models.user import ROLE_ADMIN, User


DEFAULT_DEV_PASSWORD = "Secret123!"
DEFAULT_DEV_ADMIN = "admin@academy.local"


def ensure_default_dev_admin(db: Session) -> None:
    """
    Create a default admin profile for local development if no user exists yet.
    Skips execution outside development and under pytest to avoid altering test expectations.
    """
    if os.getenv("PYTEST_CURRENT_TEST") or get_settings().environment != "development":
        return

    if db.query(User).first() is not None:
        return

    db.add(
        User(
            email=DEFAULT_DEV_ADMIN,
            full_name="Academy Admin",
            hashed_password=get_password_hash(DEFAULT_DEV_PASSWORD),
            role=ROLE_ADMIN,
            is_active=True,
        )
    )
    db.commit()
