from __future__ import annotations

import asyncio

import pytest
from argon2 import PasswordHasher

from app.models.user import User
from app.repos.user_repo import InMemoryUserRepo
from app.services.auth_service import (
    Argon2CredentialVerifier,
    PlaintextCredentialVerifier,
    authenticate_user,
    build_verifier,
)

# Small parameters keep the suite fast.
_FAST_HASHER = PasswordHasher(time_cost=1, memory_cost=8 * 1024, parallelism=1)


# ---- verifiers ----


def test_plaintext_verifier_exact_match() -> None:
    v = PlaintextCredentialVerifier()
    assert v.encode("pw1234") == "pw1234"
    assert v.verify("pw1234", "pw1234") is True
    assert v.verify("pw1235", "pw1234") is False


def test_plaintext_verifier_rejects_empty_values() -> None:
    v = PlaintextCredentialVerifier()
    assert v.verify("", "") is False
    assert v.verify("pw", "") is False


def test_argon2_verifier_round_trip() -> None:
    v = Argon2CredentialVerifier(_FAST_HASHER)
    stored = v.encode("pw1234")
    assert stored != "pw1234"
    assert stored.startswith("$argon2")
    assert v.verify("pw1234", stored) is True
    assert v.verify("wrong", stored) is False


def test_argon2_verifier_treats_plaintext_record_as_mismatch() -> None:
    v = Argon2CredentialVerifier(_FAST_HASHER)
    assert v.verify("pw1234", "pw1234") is False


def test_argon2_verifier_refuses_empty_password() -> None:
    with pytest.raises(ValueError):
        Argon2CredentialVerifier(_FAST_HASHER).encode("")


def test_build_verifier() -> None:
    assert isinstance(build_verifier("plaintext"), PlaintextCredentialVerifier)
    assert isinstance(build_verifier("argon2"), Argon2CredentialVerifier)
    with pytest.raises(ValueError, match="unknown password scheme"):
        build_verifier("md5")


# ---- authenticate_user ----


def _repo_with(password: str) -> InMemoryUserRepo:
    repo = InMemoryUserRepo()
    user = User.new(email="tee@example.com", name="Tee", password=password)
    asyncio.run(repo.add(user))
    return repo


def test_authenticate_user_success() -> None:
    repo = _repo_with("pw1234")
    user = asyncio.run(
        authenticate_user(repo, PlaintextCredentialVerifier(), "tee@example.com", "pw1234")
    )
    assert user is not None
    assert user.email == "tee@example.com"


def test_authenticate_user_wrong_password() -> None:
    repo = _repo_with("pw1234")
    user = asyncio.run(
        authenticate_user(repo, PlaintextCredentialVerifier(), "tee@example.com", "nope")
    )
    assert user is None


def test_authenticate_user_unknown_email() -> None:
    repo = _repo_with("pw1234")
    user = asyncio.run(
        authenticate_user(repo, PlaintextCredentialVerifier(), "x@example.com", "pw1234")
    )
    assert user is None


def test_authenticate_user_with_argon2_record() -> None:
    verifier = Argon2CredentialVerifier(_FAST_HASHER)
    repo = _repo_with(verifier.encode("pw1234"))
    user = asyncio.run(
        authenticate_user(repo, verifier, "tee@example.com", "pw1234")
    )
    assert user is not None
