"""Coach attendance records (GPS-verified or admin override)."""

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from academy.app.core.time import utc_now
from academy.app.db.base_class import Base

ADMIN_MARK_STATUSES = ("present", "excused")


class AttendanceRecord(Base):
    __tablename__ = "coach_attendance"
    # One attendance decision per coach, session and reference-timezone day
    __table_args__ = (
        UniqueConstraint("coach_id", "session_id", "attendance_day", name="uq_attendance_coach_session_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    coach_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False, index=True)
    latitude = Column(Float, nullable=False, default=0.0)
    longitude = Column(Float, nullable=False, default=0.0)
    distance_from_academy = Column(Float, nullable=False, default=0.0)
    attendance_timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    attendance_day = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="present")
    marked_by_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    coach = relationship("User", back_populates="attendance_records")
    session = relationship("Session", back_populates="attendance_records")
