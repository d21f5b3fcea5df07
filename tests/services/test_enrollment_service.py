from __future__ import annotations

import asyncio
import datetime

import pytest
from prometheus_client import REGISTRY

from app.models.course import Course
from app.models.user import User
from app.repos.course_repo import InMemoryCourseRepo
from app.repos.enrollment_ledger import InMemoryEnrollmentLedger
from app.repos.user_repo import InMemoryUserRepo
from app.services.access_guard import AccessGuard
from app.services.enrollment_service import EnrollmentService, parse_enrollment_date
from app.services.errors import (
    AlreadyEnrolled,
    CourseNotFound,
    Forbidden,
    InvalidRequest,
    Unauthorized,
    UserNotFound,
    UserOrEnrollmentNotFound,
)

SECRET = "svc-secret"


def _build() -> tuple[EnrollmentService, InMemoryUserRepo, InMemoryCourseRepo]:
    users = InMemoryUserRepo()
    courses = InMemoryCourseRepo()
    service = EnrollmentService(
        users=users,
        courses=courses,
        ledger=InMemoryEnrollmentLedger(users),
        guard=AccessGuard(SECRET),
    )
    return service, users, courses


def _seed(users: InMemoryUserRepo, courses: InMemoryCourseRepo) -> User:
    user = User.new(email="learner@example.com", name="Lee", password="secret123")
    course = Course.new(
        slug="door-supervisor",
        title="Door Supervisor",
        fee=199.0,
        duration="6 days",
        session="Weekday",
        category="Security",
        minimum_age=18,
        bg_color_class="bg-blue",
        overview="...",
    )

    async def _go() -> None:
        await users.add(user)
        await courses.add(course)

    asyncio.run(_go())
    return user


# ---- parse_enrollment_date ----


def test_parse_date_blank_is_none() -> None:
    assert parse_enrollment_date(None) is None
    assert parse_enrollment_date("   ") is None


def test_parse_date_bare_date_is_utc_midnight() -> None:
    parsed = parse_enrollment_date("2025-03-01")
    assert parsed == datetime.datetime(2025, 3, 1, tzinfo=datetime.UTC)


def test_parse_date_keeps_explicit_offset() -> None:
    parsed = parse_enrollment_date("2025-03-01T09:30:00+01:00")
    assert parsed is not None
    assert parsed.utcoffset() == datetime.timedelta(hours=1)


def test_parse_date_rejects_garbage() -> None:
    with pytest.raises(InvalidRequest, match="Invalid date"):
        parse_enrollment_date("soon")


# ---- enroll ----


def test_enroll_copies_course_title() -> None:
    service, users, courses = _build()
    _seed(users, courses)

    enrollment = asyncio.run(
        service.enroll("learner@example.com", "door-supervisor", "0770")
    )
    assert enrollment.title == "Door Supervisor"
    assert enrollment.completed is False
    assert enrollment.completed_at is None


def test_enroll_trims_inputs() -> None:
    service, users, courses = _build()
    _seed(users, courses)

    enrollment = asyncio.run(
        service.enroll("  learner@example.com ", " door-supervisor ", None)
    )
    assert enrollment.slug == "door-supervisor"


def test_enroll_blank_inputs_rejected() -> None:
    service, _, _ = _build()
    with pytest.raises(InvalidRequest):
        asyncio.run(service.enroll("", "door-supervisor", None))
    with pytest.raises(InvalidRequest):
        asyncio.run(service.enroll("learner@example.com", "  ", None))


def test_enroll_unknown_user_checked_before_course() -> None:
    service, _, _ = _build()
    with pytest.raises(UserNotFound):
        asyncio.run(service.enroll("ghost@example.com", "nope", None))


def test_enroll_unknown_course() -> None:
    service, users, courses = _build()
    before = _seed(users, courses)
    with pytest.raises(CourseNotFound):
        asyncio.run(service.enroll("learner@example.com", "ghost-course", None))

    stored = asyncio.run(users.get_by_email("learner@example.com"))
    assert stored is not None
    assert stored.courses == ()
    assert stored.updated_at == before.updated_at


def _invalid_enrollments() -> float:
    return REGISTRY.get_sample_value("enrollments_total", {"outcome": "invalid"}) or 0.0


def test_enroll_bad_date_checked_after_lookups() -> None:
    service, users, courses = _build()
    _seed(users, courses)
    asyncio.run(service.enroll("learner@example.com", "door-supervisor", None))

    with pytest.raises(UserNotFound):
        asyncio.run(
            service.enroll("ghost@example.com", "door-supervisor", None, date="x")
        )
    with pytest.raises(AlreadyEnrolled):
        asyncio.run(
            service.enroll("learner@example.com", "door-supervisor", None, date="x")
        )


def test_enroll_bad_date_counted_as_invalid_and_not_written() -> None:
    service, users, courses = _build()
    before = _seed(users, courses)
    invalid_before = _invalid_enrollments()

    with pytest.raises(InvalidRequest, match="Invalid date"):
        asyncio.run(
            service.enroll("learner@example.com", "door-supervisor", None, date="soon")
        )

    assert _invalid_enrollments() == invalid_before + 1
    stored = asyncio.run(users.get_by_email("learner@example.com"))
    assert stored is not None
    assert stored.courses == ()
    assert stored.updated_at == before.updated_at


def test_enroll_duplicate_rejected() -> None:
    service, users, courses = _build()
    _seed(users, courses)
    asyncio.run(service.enroll("learner@example.com", "door-supervisor", None))
    with pytest.raises(AlreadyEnrolled):
        asyncio.run(service.enroll("learner@example.com", "door-supervisor", None))


def test_concurrent_enrolls_leave_one_record() -> None:
    service, users, courses = _build()
    _seed(users, courses)

    async def _race() -> list[object]:
        return await asyncio.gather(
            *(
                service.enroll("learner@example.com", "door-supervisor", None)
                for _ in range(5)
            ),
            return_exceptions=True,
        )

    results = asyncio.run(_race())
    failures = [r for r in results if isinstance(r, BaseException)]
    assert len(failures) == 4
    assert all(isinstance(f, AlreadyEnrolled) for f in failures)

    stored = asyncio.run(users.get_by_email("learner@example.com"))
    assert stored is not None
    assert len(stored.courses) == 1


# ---- mark_course_complete ----


def test_mark_complete_requires_exact_secret() -> None:
    service, users, courses = _build()
    user = _seed(users, courses)
    enrollment = asyncio.run(
        service.enroll("learner@example.com", "door-supervisor", None)
    )

    for presented in (None, "", "svc-secre", "svc-secret "):
        with pytest.raises(Forbidden):
            asyncio.run(service.mark_course_complete(presented, user.id, enrollment.id))


def test_mark_complete_sets_flag_and_timestamp() -> None:
    service, users, courses = _build()
    user = _seed(users, courses)
    enrollment = asyncio.run(
        service.enroll("learner@example.com", "door-supervisor", None)
    )

    asyncio.run(service.mark_course_complete(SECRET, user.id, enrollment.id))

    [stored] = asyncio.run(service.list_user_courses("learner@example.com", True))
    assert stored.completed is True
    assert stored.completed_at is not None


def test_mark_complete_unknown_enrollment() -> None:
    service, users, courses = _build()
    user = _seed(users, courses)
    with pytest.raises(UserOrEnrollmentNotFound):
        asyncio.run(service.mark_course_complete(SECRET, user.id, "0" * 24))


def test_unset_secret_rejects_everyone() -> None:
    users = InMemoryUserRepo()
    service = EnrollmentService(
        users=users,
        courses=InMemoryCourseRepo(),
        ledger=InMemoryEnrollmentLedger(users),
        guard=AccessGuard(None),
    )
    with pytest.raises(Forbidden):
        asyncio.run(service.mark_course_complete("undefined", "u", "e"))


# ---- list_user_courses ----


def test_list_requires_bearer() -> None:
    service, users, courses = _build()
    _seed(users, courses)
    with pytest.raises(Unauthorized):
        asyncio.run(service.list_user_courses("learner@example.com", False))


def test_list_unknown_user() -> None:
    service, _, _ = _build()
    with pytest.raises(UserNotFound):
        asyncio.run(service.list_user_courses("ghost@example.com", True))
