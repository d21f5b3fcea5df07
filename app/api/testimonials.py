"""Testimonials: public submission, public list of approved entries, and
admin moderation behind the shared admin credential.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.dependencies import require_admin, testimonial_repo
from app.models.testimonial import Testimonial
from app.services.errors import InvalidRequest, TestimonialNotFound

logger = logging.getLogger(__name__)

router = APIRouter(tags=["testimonials"])


class TestimonialIn(BaseModel):
    name: str | None = None
    message: str | None = None
    rating: int | None = None
    courseSlug: str | None = None


class TestimonialOut(BaseModel):
    id: str
    name: str
    message: str
    rating: int
    courseSlug: str | None
    approved: bool
    createdAt: datetime.datetime

    @classmethod
    def from_testimonial(cls, t: Testimonial) -> TestimonialOut:
        return cls(
            id=t.id,
            name=t.name,
            message=t.message,
            rating=t.rating,
            courseSlug=t.course_slug,
            approved=t.approved,
            createdAt=t.created_at,
        )


@router.post(
    "/testimonials",
    response_model=TestimonialOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_testimonial(payload: TestimonialIn) -> TestimonialOut:
    name = (payload.name or "").strip()
    message = (payload.message or "").strip()
    if not name or not message:
        raise InvalidRequest("Name and message are required")
    if payload.rating is None or not 1 <= payload.rating <= 5:
        raise InvalidRequest("Rating must be between 1 and 5")

    testimonial = Testimonial.new(
        name=name,
        message=message,
        rating=payload.rating,
        course_slug=payload.courseSlug or None,
    )
    await testimonial_repo.add(testimonial)
    logger.info("Testimonial submitted  id=%s", testimonial.id)
    return TestimonialOut.from_testimonial(testimonial)


@router.get("/testimonials", response_model=list[TestimonialOut])
async def list_testimonials() -> list[TestimonialOut]:
    items = await testimonial_repo.list_all(approved_only=True)
    return [TestimonialOut.from_testimonial(t) for t in items]


@router.get(
    "/admin/testimonials",
    response_model=list[TestimonialOut],
    dependencies=[Depends(require_admin)],
)
async def admin_list_testimonials() -> list[TestimonialOut]:
    items = await testimonial_repo.list_all(approved_only=False)
    return [TestimonialOut.from_testimonial(t) for t in items]


@router.patch(
    "/admin/testimonials/{testimonial_id}/approve",
    response_model=TestimonialOut,
    dependencies=[Depends(require_admin)],
)
async def approve_testimonial(testimonial_id: str) -> TestimonialOut:
    approved = await testimonial_repo.approve(testimonial_id)
    if approved is None:
        raise TestimonialNotFound()
    logger.info("Testimonial approved  id=%s", testimonial_id)
    return TestimonialOut.from_testimonial(approved)


@router.delete(
    "/admin/testimonials/{testimonial_id}",
    dependencies=[Depends(require_admin)],
)
async def delete_testimonial(testimonial_id: str) -> dict[str, Any]:
    if not await testimonial_repo.delete(testimonial_id):
        raise TestimonialNotFound()
    logger.info("Testimonial deleted  id=%s", testimonial_id)
    return {"success": True, "message": "Testimonial deleted successfully"}
