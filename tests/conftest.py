from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Settings are read at import time; pin them before the app is imported.
os.environ.pop("MONGO_URL", None)
os.environ["APP_ENV"] = "test"
os.environ["ADMIN_SECRET"] = "test-admin-secret"
os.environ["PASSWORD_SCHEME"] = "plaintext"

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api import dependencies  # noqa: E402
from app.main import app  # noqa: E402
from app.models.course import Course  # noqa: E402
from app.models.user import User  # noqa: E402

ADMIN_SECRET = "test-admin-secret"


@pytest.fixture(autouse=True)
def reset_stores() -> None:
    """Clear every in-memory repository between tests."""
    dependencies.user_repo._by_email.clear()  # type: ignore[attr-defined]
    dependencies.user_repo._by_id.clear()  # type: ignore[attr-defined]
    dependencies.enrollment_ledger._locks.clear()  # type: ignore[attr-defined]
    dependencies.course_repo._by_slug.clear()  # type: ignore[attr-defined]
    dependencies.blog_repo._by_slug.clear()  # type: ignore[attr-defined]
    dependencies.testimonial_repo._by_id.clear()  # type: ignore[attr-defined]


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_SECRET}"}


@pytest.fixture
def bearer_headers() -> dict[str, str]:
    # Any token satisfies the course listing check.
    return {"Authorization": "Bearer any-token"}


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------


def seed_user(
    email: str = "learner@example.com",
    name: str = "Lee Learner",
    password: str = "secret123",
) -> User:
    """Create and persist a user in the in-memory repo."""
    user = User.new(email=email, name=name, password=password)
    asyncio.run(dependencies.user_repo.add(user))
    return user


def make_course(slug: str = "door-supervisor", **overrides: object) -> Course:
    attrs: dict[str, object] = {
        "title": "Door Supervisor",
        "fee": 199.0,
        "duration": "6 days",
        "session": "Weekday",
        "category": "Security",
        "minimum_age": 18,
        "bg_color_class": "bg-blue",
        "overview": "Front-of-house security training.",
    }
    attrs.update(overrides)
    return Course.new(slug=slug, **attrs)  # type: ignore[arg-type]


def seed_course(slug: str = "door-supervisor", **overrides: object) -> Course:
    """Create and persist a course in the in-memory repo."""
    course = make_course(slug, **overrides)
    asyncio.run(dependencies.course_repo.add(course))
    return course


def get_user(email: str) -> User | None:
    return asyncio.run(dependencies.user_repo.get_by_email(email))
