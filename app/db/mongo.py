"""MongoDB client and lifespan hook.

When MONGO_URL is configured, one AsyncIOMotorClient is created at import
time and shared by every request handler (the driver pools connections
internally).  Users, courses and blog content live in separate databases,
as they always have.

When MONGO_URL is None (local dev, tests), ``mongo_client`` is None and
the app wires in-memory repositories instead.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING

from app.core.config import SETTINGS

logger = logging.getLogger(__name__)

if SETTINGS.mongo_url:
    mongo_client: AsyncIOMotorClient | None = AsyncIOMotorClient(
        SETTINGS.mongo_url,
        tz_aware=True,  # datetimes come back UTC-aware, like the ones we write
        retryWrites=True,
        appname="course-enrollment-service",
    )
else:
    mongo_client = None


def users_collection() -> AsyncIOMotorCollection:
    assert mongo_client is not None
    return mongo_client[SETTINGS.users_db_name]["user"]


def courses_collection() -> AsyncIOMotorCollection:
    assert mongo_client is not None
    return mongo_client[SETTINGS.courses_db_name]["courses"]


def blog_collection() -> AsyncIOMotorCollection:
    assert mongo_client is not None
    return mongo_client[SETTINGS.blog_db_name]["blog"]


def testimonials_collection() -> AsyncIOMotorCollection:
    assert mongo_client is not None
    return mongo_client[SETTINGS.blog_db_name]["testimonials"]


async def ping() -> bool:
    """True when the configured server answers; False when unreachable."""
    if mongo_client is None:
        return False
    try:
        await mongo_client.admin.command("ping")
    except Exception:
        logger.warning("MongoDB ping failed", exc_info=True)
        return False
    return True


async def ensure_indexes() -> None:
    # Unique keys back the "no duplicate email / slug" rules under
    # concurrent inserts.
    await users_collection().create_index([("email", ASCENDING)], unique=True)
    await courses_collection().create_index([("slug", ASCENDING)], unique=True)
    await blog_collection().create_index([("slug", ASCENDING)], unique=True)
    await testimonials_collection().create_index(
        [("approved", ASCENDING), ("createdAt", ASCENDING)]
    )


@asynccontextmanager
async def lifespan_mongo():
    """Startup/shutdown hook for the Mongo client.

    A failed ping is logged, not raised: the process still starts, and
    /ready reports 503 until the server is reachable.
    """
    if mongo_client is None:
        logger.info("No MONGO_URL configured — using in-memory repositories")
        yield
        return

    if await ping():
        logger.info(
            "MongoDB connected  users_db=%s courses_db=%s blog_db=%s",
            SETTINGS.users_db_name,
            SETTINGS.courses_db_name,
            SETTINGS.blog_db_name,
        )
        await ensure_indexes()
    else:
        logger.error("MongoDB unreachable on startup")

    yield

    mongo_client.close()
    logger.info("MongoDB client closed")
