"""Enrollment endpoints.

  POST  /enroll                                           enroll a user in a course
  GET   /users/{email}/courses                            list a user's enrollments
  PATCH /admin/users/{user_id}/courses/{course_id}/complete
                                                          mark one enrollment complete

Authorization is asymmetric on purpose: the listing only needs *a* bearer
token in the request, the completion needs the exact admin secret.  Both
checks live in the service; the handlers only pass the header through.
"""

from __future__ import annotations

import datetime
from typing import Annotated

from fastapi import APIRouter, Header
from pydantic import BaseModel

from app.api.dependencies import Enrollments
from app.models.user import Enrollment
from app.services.access_guard import admin_credential, bearer_credential

router = APIRouter(tags=["enrollments"])


class EnrollIn(BaseModel):
    # All optional so a missing field is our 400, not FastAPI's 422.
    userEmail: str | None = None
    courseSlug: str | None = None
    phone: str | None = None
    location: str | None = None
    date: str | None = None


class EnrollmentOut(BaseModel):
    id: str
    slug: str
    title: str
    phone: str | None
    enrolledAt: datetime.datetime
    location: str | None
    date: datetime.datetime | None
    completed: bool
    completedAt: datetime.datetime | None = None

    @classmethod
    def from_enrollment(cls, e: Enrollment) -> EnrollmentOut:
        return cls(
            id=e.id,
            slug=e.slug,
            title=e.title,
            phone=e.phone,
            enrolledAt=e.enrolled_at,
            location=e.location,
            date=e.date,
            completed=e.completed,
            completedAt=e.completed_at,
        )


class EnrollOut(BaseModel):
    success: bool = True
    message: str
    enrollment: EnrollmentOut


class UserCoursesOut(BaseModel):
    success: bool = True
    courses: list[EnrollmentOut]


class MessageOut(BaseModel):
    success: bool = True
    message: str


@router.post("/enroll", response_model=EnrollOut)
async def enroll(payload: EnrollIn, service: Enrollments) -> EnrollOut:
    enrollment = await service.enroll(
        payload.userEmail,
        payload.courseSlug,
        payload.phone,
        location=payload.location,
        date=payload.date,
    )
    return EnrollOut(
        message="Successfully enrolled in course",
        enrollment=EnrollmentOut.from_enrollment(enrollment),
    )


@router.get("/users/{email}/courses", response_model=UserCoursesOut)
async def list_user_courses(
    email: str,
    service: Enrollments,
    authorization: Annotated[str | None, Header()] = None,
) -> UserCoursesOut:
    enrollments = await service.list_user_courses(
        email, bearer_present=bearer_credential(authorization) is not None
    )
    return UserCoursesOut(
        courses=[EnrollmentOut.from_enrollment(e) for e in enrollments]
    )


@router.patch(
    "/admin/users/{user_id}/courses/{course_id}/complete",
    response_model=MessageOut,
)
async def mark_course_complete(
    user_id: str,
    course_id: str,
    service: Enrollments,
    authorization: Annotated[str | None, Header()] = None,
) -> MessageOut:
    # course_id is the enrollment record's id, not the course slug.
    await service.mark_course_complete(
        admin_credential(authorization), user_id, course_id
    )
    return MessageOut(message="Course marked as completed")
