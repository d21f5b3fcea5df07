"""Blog post endpoints, addressed by slug."""

from __future__ import annotations

import datetime
import logging
from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.api.dependencies import blog_repo
from app.models.blog import BlogPost, normalize_tags
from app.services.errors import BlogAlreadyExists, BlogNotFound, InvalidRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blogs", tags=["blogs"])


class BlogIn(BaseModel):
    title: str | None = None
    slug: str | None = None
    metaDescription: str | None = None
    content: str | None = None
    category: str | None = None
    tags: list[str] | str | None = None
    author: str | None = None


class BlogOut(BaseModel):
    id: str
    slug: str
    title: str
    metaDescription: str | None
    content: str
    category: str
    tags: list[str]
    author: str
    publishDate: datetime.datetime
    views: int
    updatedAt: datetime.datetime | None

    @classmethod
    def from_post(cls, p: BlogPost) -> BlogOut:
        return cls(
            id=p.id,
            slug=p.slug,
            title=p.title,
            metaDescription=p.meta_description,
            content=p.content,
            category=p.category,
            tags=list(p.tags),
            author=p.author,
            publishDate=p.publish_date,
            views=p.views,
            updatedAt=p.updated_at,
        )


@router.post("", response_model=BlogOut, status_code=status.HTTP_201_CREATED)
async def create_blog(payload: BlogIn) -> BlogOut:
    required = (
        payload.title,
        payload.slug,
        payload.content,
        payload.category,
        payload.tags,
        payload.author,
    )
    if not all(required):
        raise InvalidRequest("All fields are required")

    post = BlogPost.new(
        slug=payload.slug,
        title=payload.title,
        content=payload.content,
        category=payload.category,
        tags=normalize_tags(payload.tags),
        author=payload.author,
        meta_description=payload.metaDescription,
    )
    try:
        await blog_repo.add(post)
    except ValueError:
        raise BlogAlreadyExists() from None

    logger.info("Blog post created  slug=%s", post.slug)
    return BlogOut.from_post(post)


@router.get("", response_model=list[BlogOut])
async def list_blogs() -> list[BlogOut]:
    return [BlogOut.from_post(p) for p in await blog_repo.list_all()]


@router.get("/{slug}", response_model=BlogOut)
async def get_blog(slug: str) -> BlogOut:
    post = await blog_repo.get_by_slug(slug)
    if post is None:
        raise BlogNotFound()
    # The response shows the count as read; the increment lands after.
    await blog_repo.increment_views(slug)
    return BlogOut.from_post(post)


@router.put("/{slug}", response_model=BlogOut)
async def update_blog(slug: str, payload: BlogIn) -> BlogOut:
    required = (
        payload.title,
        payload.content,
        payload.category,
        payload.tags,
        payload.author,
    )
    if not all(required):
        raise InvalidRequest("All fields except slug are required")

    updated = await blog_repo.update(
        slug,
        {
            "title": payload.title,
            "meta_description": payload.metaDescription,
            "content": payload.content,
            "category": payload.category,
            "tags": normalize_tags(payload.tags),
            "author": payload.author,
            "updated_at": datetime.datetime.now(datetime.UTC),
        },
    )
    if updated is None:
        raise BlogNotFound()

    logger.info("Blog post updated  slug=%s", slug)
    return BlogOut.from_post(updated)


@router.delete("/{slug}")
async def delete_blog(slug: str) -> dict[str, Any]:
    if not await blog_repo.delete(slug):
        raise BlogNotFound()
    logger.info("Blog post deleted  slug=%s", slug)
    return {"success": True, "message": "Blog deleted successfully"}
