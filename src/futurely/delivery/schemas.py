"""Schemas for delivery channels."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from pydantic import BaseModel, Field


class DeliveryPayload(BaseModel):
    """A letter ready to be handed to a delivery channel."""

    letter_id: uuid.UUID = Field(..., description="ID of the letter being delivered")
    salutation: str = Field(..., description="Opening line of the letter")
    body: str = Field(..., description="The letter body as plain text")
    sign_off: str = Field(..., description="Closing line of the letter")
    written_on: date = Field(..., description="Date the letter was written")
    recipient_name: str | None = Field(default=None, description="Display name of the recipient")
    recipient_email: str | None = Field(
        default=None,
        description="Recipient address for email delivery",
    )
    recipient_telegram: str | None = Field(
        default=None,
        description="Recipient @username or numeric chat_id for Telegram delivery",
    )


class DeliveryResult(BaseModel):
    """Result of a delivery attempt."""

    success: bool = Field(
        ...,
        description="Whether the delivery succeeded",
    )
    channel: str = Field(
        ...,
        description="The delivery channel used",
    )
    error_message: str | None = Field(
        default=None,
        description="Error message if delivery failed",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the delivery was attempted",
    )
