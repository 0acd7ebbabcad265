"""Pydantic schemas for fastapi-users routes."""

import uuid

from fastapi_users import schemas
from pydantic import Field

from futurely.auth.models import Plan


class UserRead(schemas.BaseUser[uuid.UUID]):
    """Public view of a user."""

    name: str | None = None
    plan: Plan = Plan.FREE


class UserCreate(schemas.BaseUserCreate):
    """Registration payload."""

    name: str | None = Field(None, max_length=255)


class UserUpdate(schemas.BaseUserUpdate):
    """Profile update payload."""

    name: str | None = Field(None, max_length=255)
