"""Pydantic schemas for waitlist signup."""

from pydantic import BaseModel, EmailStr, Field


class WaitlistJoin(BaseModel):
    """Schema for joining the waitlist."""

    email: EmailStr
    name: str | None = Field(None, max_length=255)


class WaitlistResponse(BaseModel):
    """Response after a waitlist signup."""

    already_joined: bool
    message: str
