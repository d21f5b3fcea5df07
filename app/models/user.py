from __future__ import annotations

import datetime
from dataclasses import dataclass

from app.models.ids import new_id


@dataclass(frozen=True, slots=True)
class Enrollment:
    """One user's registration in one course, embedded in the user record.

    ``title`` is copied from the catalog at enrollment time so the record
    keeps its display data if the course is later renamed or deleted.
    """

    id: str
    slug: str
    title: str
    phone: str | None
    enrolled_at: datetime.datetime
    location: str | None = None
    date: datetime.datetime | None = None
    completed: bool = False
    completed_at: datetime.datetime | None = None

    @staticmethod
    def new(
        *,
        slug: str,
        title: str,
        phone: str | None,
        enrolled_at: datetime.datetime,
        location: str | None = None,
        date: datetime.datetime | None = None,
    ) -> Enrollment:
        return Enrollment(
            id=new_id(),
            slug=slug,
            title=title,
            phone=phone,
            enrolled_at=enrolled_at,
            location=location,
            date=date,
        )


@dataclass(frozen=True, slots=True)
class User:
    id: str
    email: str
    name: str
    password: str  # stored credential, encoded by the CredentialVerifier
    created_at: datetime.datetime
    updated_at: datetime.datetime
    courses: tuple[Enrollment, ...] = ()  # insertion order = enrollment order

    @staticmethod
    def new(*, email: str, name: str, password: str) -> User:
        now = datetime.datetime.now(datetime.UTC)
        return User(
            id=new_id(),
            email=email,
            name=name,
            password=password,
            created_at=now,
            updated_at=now,
        )

    def is_enrolled_in(self, slug: str) -> bool:
        return any(e.slug == slug for e in self.courses)
