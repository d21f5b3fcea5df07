from __future__ import annotations

from typing import Protocol

from app.models.user import User


class UserRepo(Protocol):
    async def get_by_id(self, user_id: str) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def add(self, user: User) -> None: ...
    async def list_all(self) -> list[User]: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._by_email: dict[str, User] = {}
        self._by_id: dict[str, User] = {}

    async def get_by_id(self, user_id: str) -> User | None:
        return self._by_id.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return self._by_email.get(email)

    async def add(self, user: User) -> None:
        if user.email in self._by_email:
            raise ValueError("email already exists")
        self.save(user)

    async def list_all(self) -> list[User]:
        # Newest first, like the admin listing expects.
        return sorted(self._by_id.values(), key=lambda u: u.created_at, reverse=True)

    def save(self, user: User) -> None:
        """Store or overwrite a user record."""
        self._by_id[user.id] = user
        self._by_email[user.email] = user
