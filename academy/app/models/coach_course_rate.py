"""Historical hourly rates per course and coach. Rows are only ever inserted."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from academy.app.core.time import utc_now
from academy.app.db.base_class import Base


class CoachCourseRate(Base):
    __tablename__ = "course_coach_rates"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    coach_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rate = Column(Numeric(10, 2), nullable=False)
    effective_from = Column(Date, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    course = relationship("Course", back_populates="rates")
    coach = relationship("User", back_populates="rates", foreign_keys=[coach_id])
