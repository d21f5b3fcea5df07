from __future__ import annotations

from dataclasses import replace
from typing import Any, Protocol

from app.models.blog import BlogPost


class BlogRepo(Protocol):
    async def get_by_slug(self, slug: str) -> BlogPost | None: ...
    async def list_all(self) -> list[BlogPost]: ...
    async def add(self, post: BlogPost) -> None: ...
    async def update(self, slug: str, changes: dict[str, Any]) -> BlogPost | None: ...
    async def increment_views(self, slug: str) -> None: ...
    async def delete(self, slug: str) -> bool: ...


class InMemoryBlogRepo:
    def __init__(self) -> None:
        self._by_slug: dict[str, BlogPost] = {}

    async def get_by_slug(self, slug: str) -> BlogPost | None:
        return self._by_slug.get(slug)

    async def list_all(self) -> list[BlogPost]:
        return sorted(
            self._by_slug.values(), key=lambda p: p.publish_date, reverse=True
        )

    async def add(self, post: BlogPost) -> None:
        if post.slug in self._by_slug:
            raise ValueError("slug already exists")
        self._by_slug[post.slug] = post

    async def update(self, slug: str, changes: dict[str, Any]) -> BlogPost | None:
        post = self._by_slug.get(slug)
        if post is None:
            return None
        updated = replace(post, **changes)
        self._by_slug[slug] = updated
        return updated

    async def increment_views(self, slug: str) -> None:
        post = self._by_slug.get(slug)
        if post is not None:
            self._by_slug[slug] = replace(post, views=post.views + 1)

    async def delete(self, slug: str) -> bool:
        return self._by_slug.pop(slug, None) is not None
