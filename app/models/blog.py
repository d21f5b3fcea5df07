from __future__ import annotations

import datetime
from dataclasses import dataclass

from app.models.ids import new_id


@dataclass(frozen=True, slots=True)
class BlogPost:
    id: str
    slug: str
    title: str
    content: str
    category: str
    tags: tuple[str, ...]
    author: str
    publish_date: datetime.datetime
    meta_description: str | None = None
    views: int = 0
    updated_at: datetime.datetime | None = None  # None until first edit

    @staticmethod
    def new(
        *,
        slug: str,
        title: str,
        content: str,
        category: str,
        tags: tuple[str, ...],
        author: str,
        meta_description: str | None = None,
    ) -> BlogPost:
        return BlogPost(
            id=new_id(),
            slug=slug,
            title=title,
            content=content,
            category=category,
            tags=tags,
            author=author,
            publish_date=datetime.datetime.now(datetime.UTC),
            meta_description=meta_description,
        )


def normalize_tags(raw: str | list[str]) -> tuple[str, ...]:
    """Accept a list or a comma-separated string; drop blanks."""
    items = raw if isinstance(raw, list) else raw.split(",")
    return tuple(t.strip() for t in items if t.strip())
