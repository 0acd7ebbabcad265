"""Pydantic schemas for letter CRUD operations."""

import uuid
from datetime import UTC, date, datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from futurely.letters.models import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_SALUTATION,
    DEFAULT_SIGN_OFF,
    DeliveryChannelType,
    LetterStatus,
    PaperStyle,
)


def _today() -> date:
    return datetime.now(UTC).date()


class LetterBase(BaseModel):
    """Fields shared by letter create and response schemas."""

    salutation: str = Field(DEFAULT_SALUTATION, max_length=200)
    body: str = Field(..., min_length=1)
    sign_off: str = Field(DEFAULT_SIGN_OFF, max_length=200)
    font_family: str = Field(DEFAULT_FONT_FAMILY, max_length=100)
    font_size: int = Field(DEFAULT_FONT_SIZE, ge=10, le=32)
    paper_style: PaperStyle = PaperStyle.LINED
    delivery_channel: DeliveryChannelType = DeliveryChannelType.EMAIL
    recipient_name: str | None = Field(None, max_length=255)
    recipient_email: EmailStr | None = None
    recipient_telegram: str | None = Field(None, max_length=100)
    deliver_on: date


class LetterCreate(LetterBase):
    """Schema for saving a new draft letter."""

    @field_validator("body")
    @classmethod
    def body_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Letter body is required")
        return value

    @field_validator("deliver_on")
    @classmethod
    def deliver_on_in_future(cls, value: date) -> date:
        if value <= _today():
            raise ValueError("deliver_on must be a future date")
        return value

    @model_validator(mode="after")
    def recipient_matches_channel(self) -> Self:
        if self.delivery_channel == DeliveryChannelType.EMAIL and not self.recipient_email:
            raise ValueError("recipient_email is required for email delivery")
        if self.delivery_channel == DeliveryChannelType.TELEGRAM and not self.recipient_telegram:
            raise ValueError(
                "recipient_telegram is required (e.g. @username or numeric chat_id)"
            )
        return self


class LetterUpdate(BaseModel):
    """Schema for editing a draft. All fields are optional."""

    salutation: str | None = Field(None, max_length=200)
    body: str | None = Field(None, min_length=1)
    sign_off: str | None = Field(None, max_length=200)
    font_family: str | None = Field(None, max_length=100)
    font_size: int | None = Field(None, ge=10, le=32)
    paper_style: PaperStyle | None = None
    delivery_channel: DeliveryChannelType | None = None
    recipient_name: str | None = Field(None, max_length=255)
    recipient_email: EmailStr | None = None
    recipient_telegram: str | None = Field(None, max_length=100)
    deliver_on: date | None = None

    @field_validator("deliver_on")
    @classmethod
    def deliver_on_in_future(cls, value: date | None) -> date | None:
        if value is not None and value <= _today():
            raise ValueError("deliver_on must be a future date")
        return value


class LetterResponse(BaseModel):
    """Schema for letter response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    status: LetterStatus
    salutation: str | None
    body: str
    sign_off: str | None
    font_family: str
    font_size: int
    paper_style: PaperStyle
    delivery_channel: str
    recipient_name: str | None
    recipient_email: str | None
    recipient_telegram: str | None
    deliver_on: date
    created_at: datetime
    updated_at: datetime
    sealed_at: datetime | None
    delivered_at: datetime | None


class LetterListResponse(BaseModel):
    """Schema for paginated letter list response."""

    items: list[LetterResponse]
    total: int
    skip: int
    limit: int


class LetterCreatedResponse(BaseModel):
    """Response after saving a draft."""

    letter: LetterResponse
    message: str = "Letter saved as draft."


class SealLetterResponse(BaseModel):
    """Response after sealing a letter."""

    letter: LetterResponse
    message: str


class NextDelivery(BaseModel):
    """The next sealed letter due for delivery."""

    model_config = ConfigDict(from_attributes=True)

    deliver_on: date
    salutation: str | None
    delivery_channel: str


class VaultStats(BaseModel):
    """Summary of a user's letters."""

    total: int
    draft: int
    sealed: int
    delivered: int
    next_delivery: NextDelivery | None = None
