"""MongoDB implementation of UserRepo.

User documents embed their enrollments under ``courses``; the helpers at
the bottom convert between those documents and the dataclasses, and are
shared with the Mongo enrollment ledger.
"""

from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from app.models.ids import parse_id
from app.models.user import Enrollment, User


class MongoUserRepo:
    """Satisfies the UserRepo Protocol using a motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._users = collection

    async def get_by_id(self, user_id: str) -> User | None:
        oid = parse_id(user_id)
        if oid is None:
            return None
        doc = await self._users.find_one({"_id": oid})
        if doc is None:
            return None
        return doc_to_user(doc)

    async def get_by_email(self, email: str) -> User | None:
        doc = await self._users.find_one({"email": email})
        if doc is None:
            return None
        return doc_to_user(doc)

    async def add(self, user: User) -> None:
        doc = {
            "_id": parse_id(user.id),
            "name": user.name,
            "email": user.email,
            "password": user.password,
            "createdAt": user.created_at,
            "updatedAt": user.updated_at,
            "courses": [enrollment_to_doc(e) for e in user.courses],
        }
        try:
            await self._users.insert_one(doc)
        except DuplicateKeyError:
            raise ValueError("email already exists") from None

    async def list_all(self) -> list[User]:
        cursor = self._users.find({}).sort("createdAt", DESCENDING)
        return [doc_to_user(doc) async for doc in cursor]


def doc_to_user(doc: dict[str, Any]) -> User:
    return User(
        id=str(doc["_id"]),
        email=doc["email"],
        name=doc.get("name") or "",
        password=doc.get("password") or "",
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
        courses=tuple(doc_to_enrollment(c) for c in doc.get("courses") or ()),
    )


def doc_to_enrollment(doc: dict[str, Any]) -> Enrollment:
    # Records written before ids were assigned have no _id and cannot be
    # addressed for completion; they still list normally.
    return Enrollment(
        id=str(doc["_id"]) if doc.get("_id") is not None else "",
        slug=doc["slug"],
        title=doc.get("title") or "",
        phone=doc.get("phone"),
        enrolled_at=doc.get("enrolledAt"),
        location=doc.get("location"),
        date=doc.get("date"),
        completed=bool(doc.get("completed", False)),
        completed_at=doc.get("completedAt"),
    )


def enrollment_to_doc(enrollment: Enrollment) -> dict[str, Any]:
    return {
        "_id": parse_id(enrollment.id),
        "slug": enrollment.slug,
        "title": enrollment.title,
        "phone": enrollment.phone,
        "enrolledAt": enrollment.enrolled_at,
        "location": enrollment.location,
        "date": enrollment.date,
        "completed": enrollment.completed,
    }
