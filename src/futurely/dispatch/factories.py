"""Factory function to create delivery channels from a letter's channel value."""

from __future__ import annotations

from futurely.core.config import Settings
from futurely.delivery.base import DeliveryChannel
from futurely.delivery.resend import ResendEmailDelivery
from futurely.delivery.telegram import TelegramDelivery
from futurely.letters.models import DeliveryChannelType


class UnsupportedChannelError(Exception):
    """Raised when a letter names a delivery channel that does not exist."""

    def __init__(self, channel: str | None) -> None:
        self.channel = channel
        supported = ", ".join(c.value for c in DeliveryChannelType)
        super().__init__(f"Unknown channel: {channel!r} (supported: {supported})")


def create_delivery_channel(channel: str | None, config: Settings) -> DeliveryChannel:
    """Create a DeliveryChannel for a stored channel value.

    Args:
        channel: The ``delivery_channel`` value stored on the letter.
        config: Settings supplying provider credentials.

    Returns:
        A configured DeliveryChannel instance.

    Raises:
        UnsupportedChannelError: If the value is not a DeliveryChannelType.
    """
    try:
        channel_type = DeliveryChannelType(channel)
    except ValueError as e:
        raise UnsupportedChannelError(channel) from e

    match channel_type:
        case DeliveryChannelType.EMAIL:
            return ResendEmailDelivery(
                api_key=config.resend_api_key,
                from_address=config.from_email,
                api_url=config.resend_api_url,
                site_url=config.site_url,
                timeout=config.http_timeout_seconds,
            )
        case DeliveryChannelType.TELEGRAM:
            return TelegramDelivery(
                bot_token=config.telegram_bot_token,
                api_url=config.telegram_api_url,
                site_url=config.site_url,
                timeout=config.http_timeout_seconds,
            )
        case _:
            raise UnsupportedChannelError(channel)
