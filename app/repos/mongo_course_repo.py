"""MongoDB implementation of CourseRepo.

Course documents keep the key spelling the catalog has always used
(``bgColorClass``, ``minimum_age``, ``siaLicenceFee`` ...), so the mapping
below is not a simple case conversion.
"""

from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.models.course import Course
from app.models.ids import parse_id

# dataclass field -> document key; fields not listed map to themselves.
_DOC_KEYS = {
    "bg_color_class": "bgColorClass",
    "result_certificate": "resultCertificate",
    "sia_licence_fee": "siaLicenceFee",
    "additional_charges": "additionalCharges",
    "entry_requirement": "entryRequirement",
    "teaching_method": "teachingMethod",
    "is_featured": "isFeatured",
    "image_url": "imageUrl",
    "created_at": "createdAt",
}


def _key(field_name: str) -> str:
    return _DOC_KEYS.get(field_name, field_name)


class MongoCourseRepo:
    """Satisfies the CourseRepo Protocol using a motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._courses = collection

    async def get_by_slug(self, slug: str) -> Course | None:
        doc = await self._courses.find_one({"slug": slug})
        if doc is None:
            return None
        return _doc_to_course(doc)

    async def list_all(self) -> list[Course]:
        return [_doc_to_course(doc) async for doc in self._courses.find({})]

    async def list_slugs(self) -> list[str]:
        return await self._courses.distinct("slug")

    async def add(self, course: Course) -> None:
        try:
            await self._courses.insert_one(_course_to_doc(course))
        except DuplicateKeyError:
            raise ValueError("slug already exists") from None

    async def update(self, slug: str, changes: dict[str, Any]) -> Course | None:
        if not changes:
            return await self.get_by_slug(slug)
        doc = await self._courses.find_one_and_update(
            {"slug": slug},
            {"$set": {_key(k): _encode(v) for k, v in changes.items()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None
        return _doc_to_course(doc)

    async def delete(self, slug: str) -> bool:
        result = await self._courses.delete_one({"slug": slug})
        return result.deleted_count > 0


def _encode(value: Any) -> Any:
    return list(value) if isinstance(value, tuple) else value


def _course_to_doc(course: Course) -> dict[str, Any]:
    doc: dict[str, Any] = {"_id": parse_id(course.id)}
    for name in Course.__dataclass_fields__:
        if name == "id":
            continue
        doc[_key(name)] = _encode(getattr(course, name))
    return doc


def _doc_to_course(doc: dict[str, Any]) -> Course:
    def get(name: str, default: Any = "") -> Any:
        value = doc.get(_key(name))
        return default if value is None else value

    return Course(
        id=str(doc["_id"]),
        slug=doc["slug"],
        title=get("title"),
        fee=float(get("fee", 0)),
        duration=get("duration"),
        session=get("session"),
        category=get("category"),
        minimum_age=int(get("minimum_age", 0)),
        bg_color_class=get("bg_color_class"),
        overview=get("overview"),
        created_at=doc.get("createdAt"),
        short_description=get("short_description"),
        icon=get("icon"),
        assessment=get("assessment"),
        result_certificate=get("result_certificate"),
        earnings=get("earnings"),
        sia_licence_fee=get("sia_licence_fee"),
        additional_charges=get("additional_charges"),
        entry_requirement=get("entry_requirement"),
        teaching_method=get("teaching_method"),
        content=tuple(get("content", [])),
        faq=tuple(get("faq", [])),
        is_featured=bool(get("is_featured", False)),
        image_url=get("image_url"),
    )
