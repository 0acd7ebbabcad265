"""Letter domain models - content, styling, and delivery descriptor."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from futurely.core.database import Base, TimestampMixin

DEFAULT_SALUTATION = "Dear future me,"
DEFAULT_SIGN_OFF = "— Your past self"
DEFAULT_FONT_FAMILY = "EB Garamond, serif"
DEFAULT_FONT_SIZE = 16


class LetterStatus(str, enum.Enum):
    """Lifecycle state of a letter. Transitions only move forward."""

    DRAFT = "draft"
    SEALED = "sealed"
    DELIVERED = "delivered"


class DeliveryChannelType(str, enum.Enum):
    """Supported delivery channels."""

    EMAIL = "email"
    TELEGRAM = "telegram"


class PaperStyle(str, enum.Enum):
    """Visual paper style used by the letter editor."""

    LINED = "lined"
    PLAIN = "plain"
    AGED = "aged"
    IVORY = "ivory"


class Letter(TimestampMixin, Base):
    """A letter written now and delivered on a future date."""

    __tablename__ = "letters"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[LetterStatus] = mapped_column(
        Enum(LetterStatus), nullable=False, default=LetterStatus.DRAFT
    )

    # Content
    salutation: Mapped[str | None] = mapped_column(String(200), nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    sign_off: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Styling
    font_family: Mapped[str] = mapped_column(String(100), default=DEFAULT_FONT_FAMILY)
    font_size: Mapped[int] = mapped_column(default=DEFAULT_FONT_SIZE)
    paper_style: Mapped[PaperStyle] = mapped_column(Enum(PaperStyle), default=PaperStyle.LINED)

    # Delivery. The channel is kept as a plain string so a row with an
    # unrecognized value can still be loaded and reported as a failed delivery.
    delivery_channel: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DeliveryChannelType.EMAIL.value
    )
    recipient_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recipient_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    recipient_telegram: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )  # @username or numeric chat_id
    deliver_on: Mapped[date] = mapped_column(nullable=False)

    sealed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        Index("ix_letters_user_id", "user_id"),
        Index("ix_letters_status_deliver_on", "status", "deliver_on"),
    )

    def recipient_for_channel(self) -> str | None:
        """Return the recipient identifier for the letter's delivery channel."""
        if self.delivery_channel == DeliveryChannelType.EMAIL.value:
            return self.recipient_email
        if self.delivery_channel == DeliveryChannelType.TELEGRAM.value:
            return self.recipient_telegram
        return None
