"""Tests for the delivery channel factory."""

import pytest

from futurely.core.config import Settings
from futurely.delivery.base import DeliveryChannel
from futurely.delivery.resend import ResendEmailDelivery
from futurely.delivery.telegram import TelegramDelivery
from futurely.dispatch.factories import UnsupportedChannelError, create_delivery_channel
from futurely.letters.models import DeliveryChannelType


@pytest.fixture
def config() -> Settings:
    """Settings with provider credentials filled in."""
    return Settings(
        resend_api_key="re_test",
        from_email="Futurely <letters@example.com>",
        telegram_bot_token="123:abc",
        site_url="https://staging.unbeated.com",
        http_timeout_seconds=5.0,
    )


class TestCreateDeliveryChannel:
    """Tests for create_delivery_channel factory function."""

    def test_create_email_channel(self, config: Settings):
        """Should create ResendEmailDelivery for the email channel."""
        channel = create_delivery_channel("email", config)

        assert isinstance(channel, DeliveryChannel)
        assert isinstance(channel, ResendEmailDelivery)
        assert channel.channel_name == "email"
        assert channel.api_key == "re_test"
        assert channel.from_address == "Futurely <letters@example.com>"
        assert channel.site_url == "https://staging.unbeated.com"
        assert channel.timeout == 5.0

    def test_create_telegram_channel(self, config: Settings):
        """Should create TelegramDelivery for the telegram channel."""
        channel = create_delivery_channel(DeliveryChannelType.TELEGRAM.value, config)

        assert isinstance(channel, TelegramDelivery)
        assert channel.channel_name == "telegram"
        assert channel.bot_token == "123:abc"
        assert channel.timeout == 5.0

    def test_missing_credentials_do_not_fail_construction(self):
        """Credentials are checked per send, not when the channel is built."""
        config = Settings(resend_api_key="", telegram_bot_token="")

        assert isinstance(create_delivery_channel("email", config), ResendEmailDelivery)
        assert isinstance(create_delivery_channel("telegram", config), TelegramDelivery)

    def test_unknown_channel(self, config: Settings):
        """Should raise UnsupportedChannelError for an unknown value."""
        with pytest.raises(UnsupportedChannelError) as exc_info:
            create_delivery_channel("pigeon", config)

        assert exc_info.value.channel == "pigeon"
        assert str(exc_info.value) == "Unknown channel: 'pigeon' (supported: email, telegram)"

    def test_missing_channel(self, config: Settings):
        """Should raise UnsupportedChannelError when no channel is stored."""
        with pytest.raises(UnsupportedChannelError):
            create_delivery_channel(None, config)
