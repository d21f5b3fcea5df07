"""MongoDB implementation of BlogRepo."""

from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.models.blog import BlogPost
from app.models.ids import parse_id

_DOC_KEYS = {
    "meta_description": "metaDescription",
    "publish_date": "publishDate",
    "updated_at": "updatedAt",
}


class MongoBlogRepo:
    """Satisfies the BlogRepo Protocol using a motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._posts = collection

    async def get_by_slug(self, slug: str) -> BlogPost | None:
        doc = await self._posts.find_one({"slug": slug})
        if doc is None:
            return None
        return _doc_to_post(doc)

    async def list_all(self) -> list[BlogPost]:
        cursor = self._posts.find({}).sort("publishDate", DESCENDING)
        return [_doc_to_post(doc) async for doc in cursor]

    async def add(self, post: BlogPost) -> None:
        doc = {
            "_id": parse_id(post.id),
            "title": post.title,
            "slug": post.slug,
            "metaDescription": post.meta_description,
            "content": post.content,
            "category": post.category,
            "tags": list(post.tags),
            "publishDate": post.publish_date,
            "author": post.author,
            "views": post.views,
            "updatedAt": post.updated_at,
        }
        try:
            await self._posts.insert_one(doc)
        except DuplicateKeyError:
            raise ValueError("slug already exists") from None

    async def update(self, slug: str, changes: dict[str, Any]) -> BlogPost | None:
        fields = {
            _DOC_KEYS.get(k, k): list(v) if isinstance(v, tuple) else v
            for k, v in changes.items()
        }
        doc = await self._posts.find_one_and_update(
            {"slug": slug},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None
        return _doc_to_post(doc)

    async def increment_views(self, slug: str) -> None:
        await self._posts.update_one({"slug": slug}, {"$inc": {"views": 1}})

    async def delete(self, slug: str) -> bool:
        result = await self._posts.delete_one({"slug": slug})
        return result.deleted_count > 0


def _doc_to_post(doc: dict[str, Any]) -> BlogPost:
    return BlogPost(
        id=str(doc["_id"]),
        slug=doc["slug"],
        title=doc.get("title") or "",
        content=doc.get("content") or "",
        category=doc.get("category") or "",
        tags=tuple(doc.get("tags") or ()),
        author=doc.get("author") or "",
        publish_date=doc.get("publishDate"),
        meta_description=doc.get("metaDescription"),
        views=int(doc.get("views") or 0),
        updated_at=doc.get("updatedAt"),
    )
