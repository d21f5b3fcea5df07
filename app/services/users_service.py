from __future__ import annotations

import logging

from app.models.user import User
from app.repos.user_repo import UserRepo
from app.services import auth_service
from app.services.auth_service import CredentialVerifier
from app.services.errors import InvalidCredentials, InvalidRequest, UserNotFound

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AccountService:
    """Registration, login and profile reads over the identity store."""

    def __init__(self, users: UserRepo, verifier: CredentialVerifier) -> None:
        self._users = users
        self._verifier = verifier

    async def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> User:
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email or not password or not confirm_password:
            raise InvalidRequest("All fields are required")

        if password != confirm_password:
            raise InvalidRequest("Passwords do not match")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidRequest(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        if await self._users.get_by_email(email) is not None:
            logger.warning("Rejected duplicate registration email=%s", email)
            raise InvalidRequest("Email already registered")

        user = User.new(email=email, name=name, password=self._verifier.encode(password))
        try:
            await self._users.add(user)
        except ValueError:
            # Another request registered the same email in between.
            raise InvalidRequest("Email already registered") from None

        logger.info("User registered  user_id=%s email=%s", user.id, email)
        return user

    async def login(self, email: str | None, password: str | None) -> User:
        email = (email or "").strip()
        if not email or not password:
            raise InvalidRequest("Email and password are required")

        user = await auth_service.authenticate_user(
            self._users, self._verifier, email, password
        )
        if user is None:
            logger.warning("Login failed  email=%s", email)
            raise InvalidCredentials()

        logger.info("Login succeeded  user_id=%s email=%s", user.id, email)
        return user

    async def get_profile(self, email: str) -> User:
        user = await self._users.get_by_email(email)
        if user is None:
            raise UserNotFound()
        return user

    async def list_users(self) -> list[User]:
        return await self._users.list_all()
