"""Credential verification.

Everything that compares a presented secret with a stored one goes
through a ``CredentialVerifier``: user passwords at login and the shared
admin secret in the access guard.  The comparison algorithm can then
change without touching any caller.

Two implementations:

  PlaintextCredentialVerifier — stored value is the secret itself.  This
    is what existing user documents contain, so it is the default.
  Argon2CredentialVerifier — stored value is an Argon2 encoded hash
    (salt and parameters included).  Opt in with PASSWORD_SCHEME=argon2
    for new deployments.
"""

from __future__ import annotations

import logging
import secrets
from typing import Protocol

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from app.models.user import User
from app.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)


class CredentialVerifier(Protocol):
    def encode(self, plain: str) -> str:
        """Turn a new secret into the form that gets stored."""
        ...

    def verify(self, presented: str, stored: str) -> bool:
        """True iff *presented* matches the *stored* form."""
        ...


class PlaintextCredentialVerifier:
    def encode(self, plain: str) -> str:
        return plain

    def verify(self, presented: str, stored: str) -> bool:
        if not presented or not stored:
            return False
        # Same answer as ==, without leaking the match length through timing.
        return secrets.compare_digest(presented.encode(), stored.encode())


class Argon2CredentialVerifier:
    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._ph = hasher or PasswordHasher()

    def encode(self, plain: str) -> str:
        if not plain:
            raise ValueError("password must be non-empty")
        return self._ph.hash(plain)

    # verify() must catch Argon2 exceptions and return False
    def verify(self, presented: str, stored: str) -> bool:
        if not presented or not stored:
            return False
        try:
            return self._ph.verify(stored, presented)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False


def build_verifier(scheme: str) -> CredentialVerifier:
    if scheme == "argon2":
        return Argon2CredentialVerifier()
    if scheme == "plaintext":
        return PlaintextCredentialVerifier()
    raise ValueError(f"unknown password scheme {scheme!r}")


async def authenticate_user(
    repo: UserRepo, verifier: CredentialVerifier, email: str, password: str
) -> User | None:
    """Return the user when the password matches, else None.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    user = await repo.get_by_email(email)
    if user is None:
        return None
    if not verifier.verify(password, user.password):
        return None
    return user
