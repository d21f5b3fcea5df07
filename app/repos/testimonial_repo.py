from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from app.models.testimonial import Testimonial


class TestimonialRepo(Protocol):
    async def list_all(self, *, approved_only: bool) -> list[Testimonial]: ...
    async def add(self, testimonial: Testimonial) -> None: ...
    async def approve(self, testimonial_id: str) -> Testimonial | None: ...
    async def delete(self, testimonial_id: str) -> bool: ...


class InMemoryTestimonialRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, Testimonial] = {}

    async def list_all(self, *, approved_only: bool) -> list[Testimonial]:
        items = [t for t in self._by_id.values() if t.approved or not approved_only]
        return sorted(items, key=lambda t: t.created_at, reverse=True)

    async def add(self, testimonial: Testimonial) -> None:
        self._by_id[testimonial.id] = testimonial

    async def approve(self, testimonial_id: str) -> Testimonial | None:
        t = self._by_id.get(testimonial_id)
        if t is None:
            return None
        updated = replace(t, approved=True)
        self._by_id[testimonial_id] = updated
        return updated

    async def delete(self, testimonial_id: str) -> bool:
        return self._by_id.pop(testimonial_id, None) is not None
