"""MongoDB implementation of TestimonialRepo."""

from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING, ReturnDocument

from app.models.ids import parse_id
from app.models.testimonial import Testimonial


class MongoTestimonialRepo:
    """Satisfies the TestimonialRepo Protocol using a motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._testimonials = collection

    async def list_all(self, *, approved_only: bool) -> list[Testimonial]:
        query = {"approved": True} if approved_only else {}
        cursor = self._testimonials.find(query).sort("createdAt", DESCENDING)
        return [_doc_to_testimonial(doc) async for doc in cursor]

    async def add(self, testimonial: Testimonial) -> None:
        await self._testimonials.insert_one(
            {
                "_id": parse_id(testimonial.id),
                "name": testimonial.name,
                "message": testimonial.message,
                "rating": testimonial.rating,
                "courseSlug": testimonial.course_slug,
                "approved": testimonial.approved,
                "createdAt": testimonial.created_at,
            }
        )

    async def approve(self, testimonial_id: str) -> Testimonial | None:
        oid = parse_id(testimonial_id)
        if oid is None:
            return None
        doc = await self._testimonials.find_one_and_update(
            {"_id": oid},
            {"$set": {"approved": True}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None
        return _doc_to_testimonial(doc)

    async def delete(self, testimonial_id: str) -> bool:
        oid = parse_id(testimonial_id)
        if oid is None:
            return False
        result = await self._testimonials.delete_one({"_id": oid})
        return result.deleted_count > 0


def _doc_to_testimonial(doc: dict[str, Any]) -> Testimonial:
    return Testimonial(
        id=str(doc["_id"]),
        name=doc.get("name") or "",
        message=doc.get("message") or "",
        rating=int(doc.get("rating") or 0),
        created_at=doc.get("createdAt"),
        course_slug=doc.get("courseSlug"),
        approved=bool(doc.get("approved", False)),
    )
