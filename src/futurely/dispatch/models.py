"""Delivery log model - one row per delivery attempt."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from futurely.core.database import Base, utcnow


class DeliveryAttempt(Base):
    """Append-only record of a single attempt to deliver a letter."""

    __tablename__ = "delivery_attempts"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    letter_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("letters.id"), nullable=False
    )
    channel: Mapped[str | None] = mapped_column(String(20), nullable=True)  # As stored on the letter
    attempted_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    success: Mapped[bool] = mapped_column(nullable=False, default=False)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_delivery_attempts_letter_id_attempted_at", "letter_id", "attempted_at"),
    )
