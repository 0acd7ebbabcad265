"""Delivery module - output channels (email, Telegram)."""

from futurely.delivery.base import DeliveryChannel
from futurely.delivery.resend import (
    EmailAPIKeyMissingError,
    EmailError,
    EmailRecipientMissingError,
    EmailRequestError,
    EmailSenderMissingError,
    ResendAPIError,
    ResendEmailDelivery,
    render_letter_html,
    send_email,
)
from futurely.delivery.schemas import DeliveryPayload, DeliveryResult
from futurely.delivery.telegram import (
    TelegramAPIError,
    TelegramDelivery,
    TelegramError,
    TelegramRecipientMissingError,
    TelegramRequestError,
    TelegramTokenMissingError,
    build_telegram_message,
    send_telegram_message,
)

__all__ = [
    "DeliveryChannel",
    "DeliveryPayload",
    "DeliveryResult",
    "EmailAPIKeyMissingError",
    "EmailError",
    "EmailRecipientMissingError",
    "EmailRequestError",
    "EmailSenderMissingError",
    "ResendAPIError",
    "ResendEmailDelivery",
    "TelegramAPIError",
    "TelegramDelivery",
    "TelegramError",
    "TelegramRecipientMissingError",
    "TelegramRequestError",
    "TelegramTokenMissingError",
    "build_telegram_message",
    "render_letter_html",
    "send_email",
    "send_telegram_message",
]
