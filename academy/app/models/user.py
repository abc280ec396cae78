from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from academy.app.db.base_class import Base

ROLE_ADMIN = "admin"
ROLE_COACH = "coach"


class User(Base):
    """Profile of an academy admin or coach."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_COACH)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    course_links = relationship("CourseCoach", back_populates="coach", cascade="all, delete-orphan")
    rates = relationship(
        "CoachCourseRate",
        back_populates="coach",
        cascade="all, delete-orphan",
        foreign_keys="CoachCourseRate.coach_id",
    )
    sessions = relationship("Session", back_populates="paid_coach", foreign_keys="Session.paid_coach_id")
    attendance_records = relationship("AttendanceRecord", back_populates="coach", cascade="all, delete-orphan")
    adjustments = relationship(
        "Adjustment",
        back_populates="coach",
        cascade="all, delete-orphan",
        foreign_keys="Adjustment.coach_id",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_coach(self) -> bool:
        return self.role == ROLE_COACH
