from __future__ import annotations

from dataclasses import replace
from typing import Any, Protocol

from app.models.course import Course


class CourseRepo(Protocol):
    async def get_by_slug(self, slug: str) -> Course | None: ...
    async def list_all(self) -> list[Course]: ...
    async def list_slugs(self) -> list[str]: ...
    async def add(self, course: Course) -> None: ...
    async def update(self, slug: str, changes: dict[str, Any]) -> Course | None: ...
    async def delete(self, slug: str) -> bool: ...


class InMemoryCourseRepo:
    def __init__(self) -> None:
        self._by_slug: dict[str, Course] = {}

    async def get_by_slug(self, slug: str) -> Course | None:
        return self._by_slug.get(slug)

    async def list_all(self) -> list[Course]:
        return list(self._by_slug.values())

    async def list_slugs(self) -> list[str]:
        return list(self._by_slug)

    async def add(self, course: Course) -> None:
        if course.slug in self._by_slug:
            raise ValueError("slug already exists")
        self._by_slug[course.slug] = course

    async def update(self, slug: str, changes: dict[str, Any]) -> Course | None:
        course = self._by_slug.get(slug)
        if course is None:
            return None
        updated = replace(course, **changes)
        self._by_slug[slug] = updated
        return updated

    async def delete(self, slug: str) -> bool:
        return self._by_slug.pop(slug, None) is not None
