from __future__ import annotations

import datetime
from dataclasses import dataclass

from app.models.ids import new_id


@dataclass(frozen=True, slots=True)
class Testimonial:
    """Learner feedback; hidden from the public list until approved."""

    id: str
    name: str
    message: str
    rating: int  # 1..5
    created_at: datetime.datetime
    course_slug: str | None = None
    approved: bool = False

    @staticmethod
    def new(
        *, name: str, message: str, rating: int, course_slug: str | None = None
    ) -> Testimonial:
        return Testimonial(
            id=new_id(),
            name=name,
            message=message,
            rating=rating,
            created_at=datetime.datetime.now(datetime.UTC),
            course_slug=course_slug,
        )
