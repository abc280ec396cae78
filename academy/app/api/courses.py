"""Course administration endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.app.core.errors import NotFound, ValidationFailed
from academy.app.core.security import get_current_admin, get_current_user
from academy.app.db.session import get_db
from academy.app.models.course import Course, CourseCoach
from academy.app.models.user import User
from academy.app.schemas.course import CourseCreate, CourseRead, CourseUpdate
from academy.app.schemas.user import UserRead

router = APIRouter(prefix="/courses", tags=["courses"])


def _get_course(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFound("Course not found")
    return course


@router.post("/", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
async def create_course(course_in: CourseCreate, db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    course = Course(**course_in.model_dump(), created_by=current_admin.id)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@router.get("/", response_model=list[CourseRead])
async def list_courses(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    query = db.query(Course)
    if not current_user.is_admin:
        query = query.join(CourseCoach, CourseCoach.course_id == Course.id).filter(CourseCoach.coach_id == current_user.id)
    return query.order_by(Course.name.asc()).all()


@router.get("/{course_id}", response_model=CourseRead)
async def get_course(course_id: int, db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    return _get_course(db, course_id)


@router.patch("/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: int,
    update: CourseUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    course = _get_course(db, course_id)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(course, field, value)
    db.commit()
    db.refresh(course)
    return course


@router.get("/{course_id}/coaches", response_model=list[UserRead])
async def list_course_coaches(course_id: int, db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    course = _get_course(db, course_id)
    return [link.coach for link in course.coach_links]


@router.post("/{course_id}/coaches/{coach_id}", status_code=status.HTTP_201_CREATED)
async def assign_coach(
    course_id: int,
    coach_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    _get_course(db, course_id)
    coach = db.query(User).filter(User.id == coach_id).first()
    if not coach:
        raise NotFound("Coach not found")
    if not coach.is_coach:
        raise ValidationFailed("Only coaches can be assigned to courses")
    link = db.query(CourseCoach).filter(CourseCoach.course_id == course_id, CourseCoach.coach_id == coach_id).first()
    if link is None:
        link = CourseCoach(course_id=course_id, coach_id=coach_id)
        db.add(link)
        db.commit()
    return {"course_id": course_id, "coach_id": coach_id}
