"""Assert that passwords and the admin secret never appear in log output.

These tests exercise endpoints that handle sensitive data and verify
the log records contain no leaked secrets.
"""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from tests.conftest import ADMIN_SECRET, seed_user

TEST_PASSWORD = "super-s3cret-p@ssw0rd!"


def _all_log_text(caplog: pytest.LogCaptureFixture) -> str:
    return " ".join(r.getMessage() for r in caplog.records) + " ".join(
        str(vars(r)) for r in caplog.records
    )


def test_failed_login_does_not_log_password(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    seed_user(password="something-else")

    with caplog.at_level(logging.DEBUG):
        resp = client.post(
            "/login",
            json={"email": "learner@example.com", "password": TEST_PASSWORD},
        )

    assert resp.status_code == 401
    assert TEST_PASSWORD not in _all_log_text(caplog), "Password found in log output!"


def test_registration_does_not_log_password(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG):
        resp = client.post(
            "/register",
            json={
                "name": "Lee",
                "email": "lee@example.com",
                "password": TEST_PASSWORD,
                "confirmPassword": TEST_PASSWORD,
            },
        )

    assert resp.status_code == 201
    assert TEST_PASSWORD not in _all_log_text(caplog)


def test_admin_secret_not_logged(
    client: TestClient,
    admin_headers: dict[str, str],
    caplog: pytest.LogCaptureFixture,
) -> None:
    user = seed_user()

    with caplog.at_level(logging.DEBUG):
        client.patch(
            f"/admin/users/{user.id}/courses/{'0' * 24}/complete",
            headers=admin_headers,
        )
        client.patch(
            f"/admin/users/{user.id}/courses/{'0' * 24}/complete",
            headers={"Authorization": "Bearer wrong-guess"},
        )

    text = _all_log_text(caplog)
    assert ADMIN_SECRET not in text
    assert "wrong-guess" not in text
