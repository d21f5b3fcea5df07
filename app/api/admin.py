from __future__ import annotations

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.dependencies import Accounts
from app.api.users import UserDetailOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class UsersOut(BaseModel):
    success: bool = True
    users: list[UserDetailOut]


# Open like it has always been; see DESIGN.md before adding the guard here.
@router.get("/users", response_model=UsersOut)
async def admin_list_users(accounts: Accounts) -> UsersOut:
    users = await accounts.list_users()
    logger.info("Admin user list requested  count=%d", len(users))
    return UsersOut(users=[UserDetailOut.from_user(u) for u in users])
