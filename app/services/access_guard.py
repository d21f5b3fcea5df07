"""Access guard for administrative enrollment mutations.

Two checks with deliberately different strength:

  authorize()          — the admin credential must equal the shared secret
                         configured at startup (ADMIN_SECRET).  Gates
                         mark-complete and testimonial moderation.
  bearer_credential()  — any bearer-style token is present.  Gates the
                         per-user course listing; the value itself is never
                         checked against anything.

Neither is a user-scoped authorization model.  The secret is handed to the
guard at construction; an unset secret authorizes nobody.
"""

from __future__ import annotations

import logging

from app.services.auth_service import CredentialVerifier, PlaintextCredentialVerifier

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "


class AccessGuard:
    def __init__(
        self,
        secret: str | None,
        verifier: CredentialVerifier | None = None,
    ) -> None:
        self._secret = secret
        self._verifier = verifier or PlaintextCredentialVerifier()
        if not secret:
            logger.warning("ADMIN_SECRET is not set — admin endpoints will reject all")

    def authorize(self, presented: str | None) -> bool:
        if not self._secret or presented is None:
            return False
        return self._verifier.verify(presented, self._secret)


def bearer_credential(authorization: str | None) -> str | None:
    """Second space-separated part of the Authorization header, if any.

    ``"Bearer abc"`` → ``"abc"``; ``"Bearer"`` and ``"Bearer  abc"`` (double
    space) → None.  The scheme word is not checked.
    """
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def admin_credential(authorization: str | None) -> str | None:
    """Everything after a literal ``"Bearer "`` prefix, else None.

    ``authorize(admin_credential(h))`` holds exactly when
    ``h == "Bearer " + secret``.
    """
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    return authorization[len(_BEARER_PREFIX) :]
