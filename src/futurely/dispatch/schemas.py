"""Pydantic schemas for the delivery run and the delivery log API."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from futurely.delivery.schemas import DeliveryPayload
from futurely.letters.models import DEFAULT_SALUTATION, DEFAULT_SIGN_OFF


class DueLetter(BaseModel):
    """Immutable snapshot of a sealed letter selected for delivery."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: uuid.UUID
    delivery_channel: str
    salutation: str | None = None
    body: str
    sign_off: str | None = None
    recipient_name: str | None = None
    recipient_email: str | None = None
    recipient_telegram: str | None = None
    deliver_on: date
    created_at: datetime

    def to_payload(self) -> DeliveryPayload:
        """Build the channel-agnostic payload handed to a transport."""
        return DeliveryPayload(
            letter_id=self.id,
            salutation=self.salutation or DEFAULT_SALUTATION,
            body=self.body,
            sign_off=self.sign_off or DEFAULT_SIGN_OFF,
            written_on=self.created_at.date(),
            recipient_name=self.recipient_name,
            recipient_email=self.recipient_email,
            recipient_telegram=self.recipient_telegram,
        )


class DeliveryRunSummary(BaseModel):
    """Outcome counts of one scheduled delivery run."""

    run_date: date = Field(..., description="Calendar date the run delivered for")
    due: int = Field(0, ge=0, description="Sealed letters selected as due")
    delivered: int = Field(0, ge=0, description="Letters handed off successfully")
    failed: int = Field(0, ge=0, description="Letters whose delivery failed")


class DeliveryAttemptResponse(BaseModel):
    """API response schema for a delivery log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(..., description="Unique identifier for the attempt")
    letter_id: uuid.UUID = Field(..., description="ID of the letter")
    channel: str | None = Field(default=None, description="Channel the attempt used")
    attempted_at: datetime = Field(..., description="When the attempt was made")
    success: bool = Field(..., description="Whether the provider accepted the letter")
    error_message: str | None = Field(default=None, description="Failure detail")


class DeliveryAttemptListResponse(BaseModel):
    """Paginated delivery log for one letter."""

    items: list[DeliveryAttemptResponse] = Field(..., description="Attempts, newest first")
    total: int = Field(..., ge=0, description="Total number of attempts")
    skip: int = Field(..., ge=0, description="Number of items skipped")
    limit: int = Field(..., ge=1, description="Maximum items per page")
