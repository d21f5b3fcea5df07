"""Course, blog and testimonial Mongo repos against mocked collections."""

from __future__ import annotations

import asyncio
import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.models.blog import BlogPost
from app.models.course import Course
from app.repos.mongo_blog_repo import MongoBlogRepo
from app.repos.mongo_course_repo import MongoCourseRepo
from app.repos.mongo_testimonial_repo import MongoTestimonialRepo

_NOW = datetime.datetime(2025, 1, 1, tzinfo=datetime.UTC)


def _course() -> Course:
    return Course.new(
        slug="door-supervisor",
        title="Door Supervisor",
        fee=199.0,
        duration="6 days",
        session="Weekday",
        category="Security",
        minimum_age=18,
        bg_color_class="bg-blue",
        overview="...",
        sia_licence_fee="190",
        faq=({"q": "?", "a": "!"},),
    )


# ---- courses ----


def test_course_document_uses_catalog_keys() -> None:
    coll = MagicMock()
    coll.insert_one = AsyncMock()
    course = _course()

    asyncio.run(MongoCourseRepo(coll).add(course))

    [doc] = coll.insert_one.await_args.args
    assert doc["_id"] == ObjectId(course.id)
    assert doc["bgColorClass"] == "bg-blue"
    assert doc["siaLicenceFee"] == "190"
    assert doc["minimum_age"] == 18
    assert doc["faq"] == [{"q": "?", "a": "!"}]
    assert "bg_color_class" not in doc


def test_course_duplicate_slug_raises_value_error() -> None:
    coll = MagicMock()
    coll.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000"))
    with pytest.raises(ValueError):
        asyncio.run(MongoCourseRepo(coll).add(_course()))


def test_course_update_maps_field_names() -> None:
    coll = MagicMock()
    coll.find_one_and_update = AsyncMock(
        return_value={
            "_id": ObjectId(),
            "slug": "door-supervisor",
            "title": "Door Supervisor",
            "fee": "249",
            "isFeatured": True,
        }
    )

    updated = asyncio.run(
        MongoCourseRepo(coll).update("door-supervisor", {"is_featured": True, "fee": 249.0})
    )
    assert updated is not None
    assert updated.fee == 249.0
    assert updated.is_featured is True
    assert updated.earnings == ""

    filter_doc, update_doc = coll.find_one_and_update.await_args.args
    assert filter_doc == {"slug": "door-supervisor"}
    assert update_doc == {"$set": {"isFeatured": True, "fee": 249.0}}
    assert (
        coll.find_one_and_update.await_args.kwargs["return_document"]
        is ReturnDocument.AFTER
    )


def test_course_update_unknown_slug() -> None:
    coll = MagicMock()
    coll.find_one_and_update = AsyncMock(return_value=None)
    assert asyncio.run(MongoCourseRepo(coll).update("nope", {"title": "x"})) is None


def test_course_slugs_use_distinct() -> None:
    coll = MagicMock()
    coll.distinct = AsyncMock(return_value=["a", "b"])
    assert asyncio.run(MongoCourseRepo(coll).list_slugs()) == ["a", "b"]
    coll.distinct.assert_awaited_once_with("slug")


# ---- blog ----


def test_blog_increment_views_is_atomic_inc() -> None:
    coll = MagicMock()
    coll.update_one = AsyncMock()
    asyncio.run(MongoBlogRepo(coll).increment_views("hello"))
    coll.update_one.assert_awaited_once_with({"slug": "hello"}, {"$inc": {"views": 1}})


def test_blog_document_keys() -> None:
    coll = MagicMock()
    coll.insert_one = AsyncMock()
    post = BlogPost.new(
        slug="hello",
        title="Hello",
        content="...",
        category="News",
        tags=("a", "b"),
        author="Sam",
        meta_description="meta",
    )
    asyncio.run(MongoBlogRepo(coll).add(post))

    [doc] = coll.insert_one.await_args.args
    assert doc["metaDescription"] == "meta"
    assert doc["publishDate"] == post.publish_date
    assert doc["tags"] == ["a", "b"]
    assert doc["views"] == 0


# ---- testimonials ----


def test_testimonial_approve_sets_flag() -> None:
    coll = MagicMock()
    oid = ObjectId()
    coll.find_one_and_update = AsyncMock(
        return_value={
            "_id": oid,
            "name": "Alex",
            "message": "Great",
            "rating": 5,
            "approved": True,
            "createdAt": _NOW,
        }
    )

    approved = asyncio.run(MongoTestimonialRepo(coll).approve(str(oid)))
    assert approved is not None
    assert approved.approved is True
    filter_doc, update_doc = coll.find_one_and_update.await_args.args
    assert filter_doc == {"_id": oid}
    assert update_doc == {"$set": {"approved": True}}


def test_testimonial_malformed_id() -> None:
    coll = MagicMock()
    coll.find_one_and_update = AsyncMock()
    coll.delete_one = AsyncMock()
    repo = MongoTestimonialRepo(coll)

    assert asyncio.run(repo.approve("nope")) is None
    assert asyncio.run(repo.delete("nope")) is False
    coll.find_one_and_update.assert_not_awaited()
    coll.delete_one.assert_not_awaited()
