"""Course and coach assignment models."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from academy.app.core.time import utc_now
from academy.app.db.base_class import Base

COURSE_ACTIVE = "active"


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=COURSE_ACTIVE)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    coach_links = relationship("CourseCoach", back_populates="course", cascade="all, delete-orphan")
    rates = relationship("CoachCourseRate", back_populates="course", cascade="all, delete-orphan")
    sessions = relationship("Session", back_populates="course")

    @property
    def is_active(self) -> bool:
        return self.status == COURSE_ACTIVE


class CourseCoach(Base):
    __tablename__ = "course_coaches"
    __table_args__ = (UniqueConstraint("course_id", "coach_id", name="uq_course_coach"),)

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    coach_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    course = relationship("Course", back_populates="coach_links")
    coach = relationship("User", back_populates="course_links")
