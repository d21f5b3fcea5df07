"""MongoDB implementation of EnrollmentLedger.

Each operation is one conditional ``update_one`` on the user document, so
the duplicate-slug check and the append (or the id match and the
completion flag) can never be observed half-applied.  A zero-match result
is followed by a read only to pick the right error.
"""

from __future__ import annotations

import datetime
import logging

from motor.motor_asyncio import AsyncIOMotorCollection

from app.models.ids import parse_id
from app.models.user import Enrollment
from app.repos.mongo_user_repo import doc_to_enrollment, enrollment_to_doc
from app.services.errors import (
    DuplicateEnrollment,
    EnrollmentWriteFailed,
    UserNotFound,
    UserOrEnrollmentNotFound,
)

logger = logging.getLogger(__name__)


class MongoEnrollmentLedger:
    """Satisfies the EnrollmentLedger Protocol using a motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._users = collection

    async def add_enrollment(
        self, user_email: str, enrollment: Enrollment
    ) -> Enrollment:
        result = await self._users.update_one(
            {"email": user_email, "courses.slug": {"$ne": enrollment.slug}},
            {
                "$push": {"courses": enrollment_to_doc(enrollment)},
                "$set": {"updatedAt": datetime.datetime.now(datetime.UTC)},
            },
        )

        if result.matched_count == 0:
            exists = await self._users.count_documents({"email": user_email}, limit=1)
            if not exists:
                raise UserNotFound()
            raise DuplicateEnrollment()

        if result.modified_count != 1:
            logger.error(
                "Enrollment push matched but modified %d documents",
                result.modified_count,
                extra={"user_email": user_email, "course_slug": enrollment.slug},
            )
            raise EnrollmentWriteFailed()

        return enrollment

    async def mark_complete(self, user_id: str, enrollment_id: str) -> None:
        user_oid = parse_id(user_id)
        enrollment_oid = parse_id(enrollment_id)
        if user_oid is None or enrollment_oid is None:
            raise UserOrEnrollmentNotFound()

        result = await self._users.update_one(
            {
                "_id": user_oid,
                "courses": {
                    "$elemMatch": {"_id": enrollment_oid, "completed": {"$ne": True}}
                },
            },
            {
                "$set": {
                    "courses.$.completed": True,
                    "courses.$.completedAt": datetime.datetime.now(datetime.UTC),
                }
            },
        )
        if result.matched_count:
            return

        # Either already completed (no-op) or one of the ids is unknown.
        exists = await self._users.count_documents(
            {"_id": user_oid, "courses._id": enrollment_oid}, limit=1
        )
        if not exists:
            raise UserOrEnrollmentNotFound()

    async def list_enrollments(self, user_email: str) -> list[Enrollment]:
        doc = await self._users.find_one({"email": user_email}, {"courses": 1})
        if doc is None:
            raise UserNotFound()
        return [doc_to_enrollment(c) for c in doc.get("courses") or ()]
