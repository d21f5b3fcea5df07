"""Course catalog endpoints, addressed by slug.

Enrollments copy the course title at enrollment time, so editing or
deleting a course here never rewrites existing enrollment records.

  POST   /courses            create (201)
  GET    /courses            full documents
  GET    /courses/slugs      slug list for navigation
  GET    /courses/{slug}     formatted detail view
  PUT    /courses/{slug}     partial update; the slug itself is fixed
  DELETE /courses/{slug}
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.api.dependencies import course_repo
from app.models.course import Course
from app.services.errors import CourseAlreadyExists, CourseNotFound, InvalidRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["courses"])

# JSON key -> Course field, for everything except slug/title.
_FIELD_NAMES = {
    "short_description": "short_description",
    "icon": "icon",
    "bgColorClass": "bg_color_class",
    "fee": "fee",
    "duration": "duration",
    "session": "session",
    "category": "category",
    "minimum_age": "minimum_age",
    "assessment": "assessment",
    "resultCertificate": "result_certificate",
    "earnings": "earnings",
    "siaLicenceFee": "sia_licence_fee",
    "additionalCharges": "additional_charges",
    "entryRequirement": "entry_requirement",
    "teachingMethod": "teaching_method",
    "overview": "overview",
    "content": "content",
    "faq": "faq",
    "isFeatured": "is_featured",
    "imageUrl": "image_url",
}


class CourseIn(BaseModel):
    title: str | None = None
    slug: str | None = None
    short_description: str | None = None
    icon: str | None = None
    bgColorClass: str | None = None
    fee: float | str | None = None
    duration: str | None = None
    session: str | None = None
    category: str | None = None
    minimum_age: int | str | None = None
    assessment: str | None = None
    resultCertificate: str | None = None
    earnings: str | None = None
    siaLicenceFee: str | None = None
    additionalCharges: str | None = None
    entryRequirement: str | None = None
    teachingMethod: str | None = None
    overview: str | None = None
    content: list[Any] | None = None
    faq: list[Any] | None = None
    isFeatured: bool | None = None
    imageUrl: str | None = None


class CourseUpdateIn(CourseIn):
    pass


class CourseOut(BaseModel):
    id: str
    slug: str
    title: str
    short_description: str
    icon: str
    bgColorClass: str
    fee: float
    duration: str
    session: str
    category: str
    minimum_age: int
    assessment: str
    resultCertificate: str
    earnings: str
    siaLicenceFee: str
    additionalCharges: str
    entryRequirement: str
    teachingMethod: str
    overview: str
    content: list[Any]
    faq: list[Any]
    isFeatured: bool
    imageUrl: str
    createdAt: datetime.datetime | None

    @classmethod
    def from_course(cls, c: Course) -> CourseOut:
        values: dict[str, Any] = {
            key: getattr(c, name) for key, name in _FIELD_NAMES.items()
        }
        values["content"] = list(c.content)
        values["faq"] = list(c.faq)
        return cls(id=c.id, slug=c.slug, title=c.title, createdAt=c.created_at, **values)


def _course_detail(c: Course) -> dict[str, Any]:
    """Detail view with display fallbacks for the optional marketing fields."""
    return {
        "slug": c.slug,
        "title": c.title,
        "short_description": c.short_description,
        "fee": c.fee if c.fee else "Not specified",
        "icon": c.icon,
        "duration": c.duration,
        "session": c.session,
        "category": c.category,
        "assessment": c.assessment,
        "result_certificate": c.result_certificate,
        "minimum_age": c.minimum_age,
        "earnings": c.earnings or "Not specified",
        "siaLicenceFee": c.sia_licence_fee or "Not specified",
        "additionalCharges": c.additional_charges or "None",
        "faq": list(c.faq),
        "entryRequirement": c.entry_requirement or "None specified",
        "teachingMethod": c.teaching_method or "Not specified",
        "overview": c.overview,
        "content": list(c.content),
        "imageUrl": c.image_url,
        "isFeatured": c.is_featured,
    }


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_course(payload: CourseIn) -> dict[str, Any]:
    fee = _as_float(payload.fee)
    minimum_age = _as_int(payload.minimum_age)
    required = (
        payload.title,
        payload.slug,
        payload.duration,
        payload.session,
        payload.category,
        payload.bgColorClass,
        payload.overview,
    )
    if not all(required) or fee is None or minimum_age is None:
        raise InvalidRequest("Missing or invalid required fields.")

    course = Course.new(
        slug=payload.slug,
        title=payload.title,
        fee=fee,
        duration=payload.duration,
        session=payload.session,
        category=payload.category,
        minimum_age=minimum_age,
        bg_color_class=payload.bgColorClass,
        overview=payload.overview,
        short_description=payload.short_description or "",
        icon=payload.icon or "",
        assessment=payload.assessment or "",
        result_certificate=payload.resultCertificate or "",
        earnings=payload.earnings or "",
        sia_licence_fee=payload.siaLicenceFee or "",
        additional_charges=payload.additionalCharges or "",
        entry_requirement=payload.entryRequirement or "",
        teaching_method=payload.teachingMethod or "",
        content=tuple(payload.content or ()),
        faq=tuple(payload.faq or ()),
        is_featured=bool(payload.isFeatured),
        image_url=payload.imageUrl or "",
    )

    if await course_repo.get_by_slug(course.slug) is not None:
        raise CourseAlreadyExists()
    try:
        await course_repo.add(course)
    except ValueError:
        raise CourseAlreadyExists() from None

    logger.info("Course created  slug=%s", course.slug)
    return {
        "success": True,
        "message": "Course created successfully",
        "insertedId": course.id,
    }


@router.get("")
async def list_courses() -> dict[str, Any]:
    courses = await course_repo.list_all()
    return {
        "success": True,
        "courses": [CourseOut.from_course(c).model_dump() for c in courses],
        "message": "Courses fetched successfully",
    }


# Registered before /{slug} so "slugs" is not taken for a course slug.
@router.get("/slugs")
async def list_course_slugs() -> dict[str, Any]:
    slugs = await course_repo.list_slugs()
    return {"success": True, "count": len(slugs), "slugs": slugs}


@router.get("/{slug}")
async def get_course(slug: str) -> dict[str, Any]:
    course = await course_repo.get_by_slug(slug)
    if course is None:
        raise CourseNotFound()
    return {"success": True, "course": _course_detail(course)}


@router.put("/{slug}")
async def update_course(slug: str, payload: CourseUpdateIn) -> dict[str, Any]:
    raw = payload.model_dump(exclude_unset=True)
    raw.pop("slug", None)

    changes: dict[str, Any] = {}
    if "title" in raw:
        changes["title"] = raw.pop("title")
    for key, value in raw.items():
        changes[_FIELD_NAMES[key]] = value

    if "fee" in changes:
        changes["fee"] = _as_float(changes["fee"])
    if "minimum_age" in changes:
        changes["minimum_age"] = _as_int(changes["minimum_age"])
    for name in ("content", "faq"):
        if name in changes:
            changes[name] = tuple(changes[name] or ())
    if any(v is None for v in changes.values()):
        raise InvalidRequest("Missing or invalid required fields.")

    updated = await course_repo.update(slug, changes)
    if updated is None:
        raise CourseNotFound()

    logger.info("Course updated  slug=%s fields=%s", slug, sorted(changes))
    return {"success": True, "message": "Course updated successfully"}


@router.delete("/{slug}")
async def delete_course(slug: str) -> dict[str, Any]:
    if not await course_repo.delete(slug):
        raise CourseNotFound()
    logger.info("Course deleted  slug=%s", slug)
    return {"success": True, "message": "Course deleted successfully"}
