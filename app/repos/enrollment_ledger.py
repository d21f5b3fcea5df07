"""Enrollment ledger: the embedded ``courses`` list of each user record.

The ledger owns the two mutations an enrollment ever sees:

  add_enrollment  — append, refusing a second record for the same slug
  mark_complete   — flip ``completed`` false → true, addressed by
                    (user id, enrollment id)

Both must behave as if serialized per user.  The Mongo implementation
gets that from single-document atomic updates; the in-memory one below
holds a per-user asyncio.Lock across check-then-write.
"""

from __future__ import annotations

import asyncio
import datetime
from collections import defaultdict
from dataclasses import replace
from typing import Protocol

from app.models.user import Enrollment
from app.repos.user_repo import InMemoryUserRepo
from app.services.errors import (
    DuplicateEnrollment,
    UserNotFound,
    UserOrEnrollmentNotFound,
)


class EnrollmentLedger(Protocol):
    async def add_enrollment(
        self, user_email: str, enrollment: Enrollment
    ) -> Enrollment: ...

    async def mark_complete(self, user_id: str, enrollment_id: str) -> None: ...

    async def list_enrollments(self, user_email: str) -> list[Enrollment]: ...


class InMemoryEnrollmentLedger:
    def __init__(self, users: InMemoryUserRepo) -> None:
        self._users = users
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def add_enrollment(
        self, user_email: str, enrollment: Enrollment
    ) -> Enrollment:
        user = await self._users.get_by_email(user_email)
        if user is None:
            raise UserNotFound()

        async with self._locks[user.id]:
            # Re-read under the lock: another task may have appended first.
            current = await self._users.get_by_id(user.id)
            if current is None:
                raise UserNotFound()
            if current.is_enrolled_in(enrollment.slug):
                raise DuplicateEnrollment()

            self._users.save(
                replace(
                    current,
                    courses=current.courses + (enrollment,),
                    updated_at=datetime.datetime.now(datetime.UTC),
                )
            )
        return enrollment

    async def mark_complete(self, user_id: str, enrollment_id: str) -> None:
        if await self._users.get_by_id(user_id) is None:
            raise UserOrEnrollmentNotFound()

        async with self._locks[user_id]:
            user = await self._users.get_by_id(user_id)
            if user is None:
                raise UserOrEnrollmentNotFound()

            for index, enrollment in enumerate(user.courses):
                if enrollment.id == enrollment_id:
                    break
            else:
                raise UserOrEnrollmentNotFound()

            if enrollment.completed:
                return  # completedAt is written once, on the transition

            done = replace(
                enrollment,
                completed=True,
                completed_at=datetime.datetime.now(datetime.UTC),
            )
            courses = user.courses[:index] + (done,) + user.courses[index + 1 :]
            self._users.save(replace(user, courses=courses))

    async def list_enrollments(self, user_email: str) -> list[Enrollment]:
        user = await self._users.get_by_email(user_email)
        if user is None:
            raise UserNotFound()
        return list(user.courses)
