"""Logged coaching session. Pay fields are computed once at write time."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Time
from sqlalchemy.orm import relationship

from academy.app.core.time import utc_now
from academy.app.db.base_class import Base


class Session(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    paid_coach_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    originally_scheduled_coach_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    session_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    session_type = Column(String(20), nullable=False, default="online_session")
    notes = Column(Text, nullable=True)
    attendance_required = Column(Boolean, nullable=False, default=False)
    computed_hours = Column(Numeric(6, 2), nullable=False)
    applied_rate = Column(Numeric(10, 2), nullable=False)
    rate_source = Column(String(30), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    course = relationship("Course", back_populates="sessions")
    paid_coach = relationship("User", back_populates="sessions", foreign_keys=[paid_coach_id])
    originally_scheduled_coach = relationship("User", foreign_keys=[originally_scheduled_coach_id])
    attendance_records = relationship("AttendanceRecord", back_populates="session", cascade="all, delete-orphan")
