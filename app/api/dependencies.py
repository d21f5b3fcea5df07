"""Repository and service wiring shared by the routers.

Repositories are module-level singletons, chosen once at import time:
MongoDB-backed when MONGO_URL is configured, in-memory otherwise (the
test suite always runs in-memory and clears them between tests).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Header

from app.core.config import SETTINGS
from app.core.metrics import ACCESS_DENIED
from app.db import mongo
from app.repos.blog_repo import BlogRepo, InMemoryBlogRepo
from app.repos.course_repo import CourseRepo, InMemoryCourseRepo
from app.repos.enrollment_ledger import EnrollmentLedger, InMemoryEnrollmentLedger
from app.repos.testimonial_repo import InMemoryTestimonialRepo, TestimonialRepo
from app.repos.user_repo import InMemoryUserRepo, UserRepo
from app.services.access_guard import AccessGuard, admin_credential
from app.services.auth_service import PlaintextCredentialVerifier, build_verifier
from app.services.enrollment_service import EnrollmentService
from app.services.errors import Forbidden
from app.services.users_service import AccountService

logger = logging.getLogger(__name__)

user_repo: UserRepo
course_repo: CourseRepo
enrollment_ledger: EnrollmentLedger
blog_repo: BlogRepo
testimonial_repo: TestimonialRepo

if mongo.mongo_client is not None:
    from app.repos.mongo_blog_repo import MongoBlogRepo
    from app.repos.mongo_course_repo import MongoCourseRepo
    from app.repos.mongo_enrollment_ledger import MongoEnrollmentLedger
    from app.repos.mongo_testimonial_repo import MongoTestimonialRepo
    from app.repos.mongo_user_repo import MongoUserRepo

    user_repo = MongoUserRepo(mongo.users_collection())
    course_repo = MongoCourseRepo(mongo.courses_collection())
    enrollment_ledger = MongoEnrollmentLedger(mongo.users_collection())
    blog_repo = MongoBlogRepo(mongo.blog_collection())
    testimonial_repo = MongoTestimonialRepo(mongo.testimonials_collection())
else:
    _users = InMemoryUserRepo()
    user_repo = _users
    course_repo = InMemoryCourseRepo()
    enrollment_ledger = InMemoryEnrollmentLedger(_users)
    blog_repo = InMemoryBlogRepo()
    testimonial_repo = InMemoryTestimonialRepo()

# The admin secret is a shared token, never stored hashed, so the guard
# always compares it as plaintext; PASSWORD_SCHEME only governs passwords.
access_guard = AccessGuard(SETTINGS.admin_secret, PlaintextCredentialVerifier())

enrollment_service = EnrollmentService(
    users=user_repo,
    courses=course_repo,
    ledger=enrollment_ledger,
    guard=access_guard,
)

account_service = AccountService(
    users=user_repo,
    verifier=build_verifier(SETTINGS.password_scheme),
)


def get_enrollment_service() -> EnrollmentService:
    return enrollment_service


def get_account_service() -> AccountService:
    return account_service


def require_admin(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Dependency for admin-only content moderation endpoints.

    Usage: dependencies=[Depends(require_admin)]
    Raises Forbidden (403) unless the header is ``Bearer <ADMIN_SECRET>``.
    """
    if not access_guard.authorize(admin_credential(authorization)):
        ACCESS_DENIED.labels(reason="admin_mismatch").inc()
        logger.warning("Admin access denied")
        raise Forbidden()


Enrollments = Annotated[EnrollmentService, Depends(get_enrollment_service)]
Accounts = Annotated[AccountService, Depends(get_account_service)]
