"""Enrollment orchestration.

    enroll                 user + course lookup (in parallel) → checks →
                           ledger append
    mark_course_complete   admin credential → ledger completion
    list_user_courses      bearer presence → ledger read

Enrollment state per record is ``Enrolled → Completed``; enroll is the only
way in, mark_course_complete the only way forward, and nothing goes back.
"""

from __future__ import annotations

import asyncio
import datetime
import logging

from app.core.metrics import ACCESS_DENIED, COURSE_COMPLETIONS, ENROLLMENTS
from app.models.user import Enrollment
from app.repos.course_repo import CourseRepo
from app.repos.enrollment_ledger import EnrollmentLedger
from app.repos.user_repo import UserRepo
from app.services.access_guard import AccessGuard
from app.services.errors import (
    AlreadyEnrolled,
    CourseNotFound,
    EnrollmentWriteFailed,
    Forbidden,
    InvalidRequest,
    Unauthorized,
    UserOrEnrollmentNotFound,
    UserNotFound,
)

logger = logging.getLogger(__name__)


def parse_enrollment_date(raw: str | None) -> datetime.datetime | None:
    """Parse the caller's preferred start date (ISO-8601), or None if blank.

    A bare date ("2025-03-01") becomes midnight UTC; a naive datetime is
    taken as UTC.
    """
    if raw is None or not raw.strip():
        return None
    try:
        parsed = datetime.datetime.fromisoformat(raw.strip())
    except ValueError:
        raise InvalidRequest("Invalid date") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.UTC)
    return parsed


class EnrollmentService:
    def __init__(
        self,
        users: UserRepo,
        courses: CourseRepo,
        ledger: EnrollmentLedger,
        guard: AccessGuard,
    ) -> None:
        self._users = users
        self._courses = courses
        self._ledger = ledger
        self._guard = guard

    async def enroll(
        self,
        user_email: str | None,
        course_slug: str | None,
        phone: str | None,
        location: str | None = None,
        date: str | None = None,
    ) -> Enrollment:
        user_email = (user_email or "").strip()
        course_slug = (course_slug or "").strip()
        if not user_email or not course_slug:
            ENROLLMENTS.labels(outcome="invalid").inc()
            raise InvalidRequest("User email and course slug are required")

        log_ctx = {"user_email": user_email, "course_slug": course_slug}

        # Both lookups are issued before either result is needed.
        user, course = await asyncio.gather(
            self._users.get_by_email(user_email),
            self._courses.get_by_slug(course_slug),
        )

        if user is None:
            ENROLLMENTS.labels(outcome="user_not_found").inc()
            logger.warning("Enroll rejected: unknown user", extra=log_ctx)
            raise UserNotFound()
        if course is None:
            ENROLLMENTS.labels(outcome="course_not_found").inc()
            logger.warning("Enroll rejected: unknown course", extra=log_ctx)
            raise CourseNotFound()
        if user.is_enrolled_in(course_slug):
            ENROLLMENTS.labels(outcome="already_enrolled").inc()
            logger.info("Enroll rejected: already enrolled", extra=log_ctx)
            raise AlreadyEnrolled()

        try:
            parsed_date = parse_enrollment_date(date)
        except InvalidRequest:
            ENROLLMENTS.labels(outcome="invalid").inc()
            raise

        enrollment = Enrollment.new(
            slug=course_slug,
            title=course.title,
            phone=phone,
            enrolled_at=datetime.datetime.now(datetime.UTC),
            location=location or None,
            date=parsed_date,
        )

        try:
            saved = await self._ledger.add_enrollment(user_email, enrollment)
        except AlreadyEnrolled:
            # Lost a race with a concurrent enroll for the same slug.
            ENROLLMENTS.labels(outcome="already_enrolled").inc()
            logger.info("Enroll rejected: concurrent duplicate", extra=log_ctx)
            raise
        except EnrollmentWriteFailed:
            ENROLLMENTS.labels(outcome="write_failed").inc()
            raise

        ENROLLMENTS.labels(outcome="created").inc()
        logger.info(
            "Enrolled  enrollment_id=%s",
            saved.id,
            extra={**log_ctx, "enrollment_id": saved.id},
        )
        return saved

    async def mark_course_complete(
        self, admin_credential: str | None, user_id: str, enrollment_id: str
    ) -> None:
        log_ctx = {"user_id": user_id, "enrollment_id": enrollment_id}

        if not self._guard.authorize(admin_credential):
            ACCESS_DENIED.labels(reason="admin_mismatch").inc()
            COURSE_COMPLETIONS.labels(outcome="forbidden").inc()
            logger.warning("Mark-complete rejected: bad admin credential", extra=log_ctx)
            raise Forbidden()

        try:
            await self._ledger.mark_complete(user_id, enrollment_id)
        except UserOrEnrollmentNotFound:
            COURSE_COMPLETIONS.labels(outcome="not_found").inc()
            logger.warning("Mark-complete: user or enrollment not found", extra=log_ctx)
            raise

        COURSE_COMPLETIONS.labels(outcome="completed").inc()
        logger.info("Enrollment marked complete", extra=log_ctx)

    async def list_user_courses(
        self, user_email: str, bearer_present: bool
    ) -> list[Enrollment]:
        if not bearer_present:
            ACCESS_DENIED.labels(reason="missing_bearer").inc()
            raise Unauthorized()
        return await self._ledger.list_enrollments(user_email)
