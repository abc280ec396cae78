from academy.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from academy.app.models.user import User  # noqa: F401
from academy.app.models.course import Course, CourseCoach  # noqa: F401
from academy.app.models.coach_course_rate import CoachCourseRate  # noqa: F401
from academy.app.models.session import Session  # noqa: F401
from academy.app.models.attendance import AttendanceRecord  # noqa: F401
from academy.app.models.adjustment import Adjustment  # noqa: F401
