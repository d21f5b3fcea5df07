"""Account endpoints: POST /register, POST /login, GET /users/{email}.

Login returns the user profile only; no session or token is issued.
Stored passwords never appear in a response.
"""

from __future__ import annotations

import datetime

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.api.dependencies import Accounts
from app.api.enrollments import EnrollmentOut
from app.models.user import User

router = APIRouter(tags=["users"])


class RegisterIn(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    confirmPassword: str | None = None


class LoginIn(BaseModel):
    email: str | None = None
    password: str | None = None


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    createdAt: datetime.datetime

    @classmethod
    def from_user(cls, user: User) -> UserOut:
        return cls(
            id=user.id, name=user.name, email=user.email, createdAt=user.created_at
        )


class UserDetailOut(UserOut):
    updatedAt: datetime.datetime | None
    courses: list[EnrollmentOut]

    @classmethod
    def from_user(cls, user: User) -> UserDetailOut:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            createdAt=user.created_at,
            updatedAt=user.updated_at,
            courses=[EnrollmentOut.from_enrollment(e) for e in user.courses],
        )


class AuthOut(BaseModel):
    success: bool = True
    message: str
    user: UserOut


class ProfileOut(BaseModel):
    success: bool = True
    user: UserDetailOut


@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterIn, accounts: Accounts) -> AuthOut:
    user = await accounts.register(
        payload.name, payload.email, payload.password, payload.confirmPassword
    )
    return AuthOut(message="Registration successful", user=UserOut.from_user(user))


@router.post("/login", response_model=AuthOut)
async def login(payload: LoginIn, accounts: Accounts) -> AuthOut:
    user = await accounts.login(payload.email, payload.password)
    return AuthOut(message="Login successful", user=UserOut.from_user(user))


@router.get("/users/{email}", response_model=ProfileOut)
async def get_user(email: str, accounts: Accounts) -> ProfileOut:
    user = await accounts.get_profile(email)
    return ProfileOut(user=UserDetailOut.from_user(user))
