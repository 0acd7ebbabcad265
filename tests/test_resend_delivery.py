"""Tests for the Resend email delivery channel."""

from __future__ import annotations

import uuid
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from futurely.delivery import (
    DeliveryPayload,
    EmailAPIKeyMissingError,
    EmailRecipientMissingError,
    EmailRequestError,
    EmailSenderMissingError,
    ResendAPIError,
    ResendEmailDelivery,
    render_letter_html,
    send_email,
)
from futurely.delivery.resend import EMAIL_SUBJECT

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def sample_payload() -> DeliveryPayload:
    """Create a sample letter payload for testing."""
    return DeliveryPayload(
        letter_id=uuid.uuid4(),
        salutation="Dear future me,",
        body="Did you finish the marathon?\nI hope so.",
        sign_off="— Your past self",
        written_on=date(2025, 1, 15),
        recipient_email="me@example.com",
    )


@pytest.fixture
def mock_success_response() -> MagicMock:
    """Create a mock Resend success response."""
    response = MagicMock()
    response.status_code = 200
    response.is_success = True
    response.text = '{"id": "email_123"}'
    return response


def _mock_async_client(mock_client_class: MagicMock, response=None, side_effect=None) -> AsyncMock:
    mock_client = AsyncMock()
    if side_effect is not None:
        mock_client.post.side_effect = side_effect
    else:
        mock_client.post.return_value = response
    mock_client.__aenter__.return_value = mock_client
    mock_client.__aexit__.return_value = None
    mock_client_class.return_value = mock_client
    return mock_client


# -----------------------------------------------------------------------------
# Rendering Tests
# -----------------------------------------------------------------------------


class TestRenderLetterHtml:
    """Tests for the HTML email template."""

    def test_contains_letter_parts(self, sample_payload: DeliveryPayload) -> None:
        """Salutation, body, sign-off and written date all appear."""
        html = render_letter_html(sample_payload)

        assert "Dear future me," in html
        assert "Did you finish the marathon?" in html
        assert "— Your past self" in html
        assert "2025-01-15" in html
        assert html.startswith("<!DOCTYPE html>")

    def test_escapes_script_in_body(self, sample_payload: DeliveryPayload) -> None:
        """A script tag in the body is rendered as text."""
        payload = sample_payload.model_copy(update={"body": "<script>alert(1)</script>"})

        html = render_letter_html(payload)

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html

    def test_escapes_ampersand_in_sign_off(self, sample_payload: DeliveryPayload) -> None:
        """Ampersands in user text are escaped."""
        payload = sample_payload.model_copy(update={"sign_off": "Love & luck"})

        html = render_letter_html(payload)

        assert "Love &amp; luck" in html
        assert "Love & luck" not in html

    def test_escapes_quotes_in_salutation(self, sample_payload: DeliveryPayload) -> None:
        """Quotes are escaped as well."""
        payload = sample_payload.model_copy(update={"salutation": "Dear \"me\" & 'you'"})

        html = render_letter_html(payload)

        assert "&#34;me&#34;" in html
        assert "&#39;you&#39;" in html

    def test_uses_site_url_in_footer(self, sample_payload: DeliveryPayload) -> None:
        """The footer links to the configured site."""
        html = render_letter_html(sample_payload, site_url="https://staging.unbeated.com")

        assert 'href="https://staging.unbeated.com"' in html


# -----------------------------------------------------------------------------
# send_email Tests
# -----------------------------------------------------------------------------


class TestSendEmail:
    """Tests for the send_email function."""

    @pytest.mark.asyncio
    async def test_missing_api_key(self) -> None:
        """Test that an empty API key raises before any request."""
        with pytest.raises(EmailAPIKeyMissingError, match="RESEND_API_KEY is not set"):
            await send_email("", "Futurely <a@b.com>", "me@example.com", "s", "<p>x</p>")

    @pytest.mark.asyncio
    async def test_missing_sender(self) -> None:
        """Test that an empty sender raises."""
        with pytest.raises(EmailSenderMissingError):
            await send_email("re_key", "", "me@example.com", "s", "<p>x</p>")

    @pytest.mark.asyncio
    async def test_missing_recipient(self) -> None:
        """Test that an empty recipient raises."""
        with pytest.raises(EmailRecipientMissingError, match="No recipient_email on letter"):
            await send_email("re_key", "Futurely <a@b.com>", None, "s", "<p>x</p>")

    @pytest.mark.asyncio
    async def test_successful_send(self, mock_success_response: MagicMock) -> None:
        """Test a successful send posts the expected request."""
        with patch("futurely.delivery.resend.httpx.AsyncClient") as mock_client_class:
            mock_client = _mock_async_client(mock_client_class, response=mock_success_response)

            result = await send_email(
                "re_key",
                "Futurely <letters@example.com>",
                "me@example.com",
                "Subject",
                "<p>Hello</p>",
                timeout=5.0,
            )

            assert result is True
            mock_client_class.assert_called_once_with(timeout=5.0)
            call_args = mock_client.post.call_args
            assert call_args.args[0] == "https://api.resend.com/emails"
            assert call_args.kwargs["headers"]["Authorization"] == "Bearer re_key"
            assert call_args.kwargs["json"] == {
                "from": "Futurely <letters@example.com>",
                "to": ["me@example.com"],
                "subject": "Subject",
                "html": "<p>Hello</p>",
            }

    @pytest.mark.asyncio
    async def test_non_success_status(self) -> None:
        """Test that a non-2xx response raises ResendAPIError."""
        response = MagicMock()
        response.status_code = 422
        response.is_success = False
        response.text = "Invalid `to` field"

        with patch("futurely.delivery.resend.httpx.AsyncClient") as mock_client_class:
            _mock_async_client(mock_client_class, response=response)

            with pytest.raises(ResendAPIError) as exc_info:
                await send_email("re_key", "a@b.com", "me@example.com", "s", "<p>x</p>")

        assert exc_info.value.status_code == 422
        assert str(exc_info.value) == "Resend error 422: Invalid `to` field"

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """Test that an httpx timeout raises EmailRequestError."""
        with patch("futurely.delivery.resend.httpx.AsyncClient") as mock_client_class:
            _mock_async_client(
                mock_client_class,
                side_effect=httpx.ReadTimeout("timed out"),
            )

            with pytest.raises(EmailRequestError, match="timed out"):
                await send_email("re_key", "a@b.com", "me@example.com", "s", "<p>x</p>")

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        """Test that a transport error raises EmailRequestError."""
        with patch("futurely.delivery.resend.httpx.AsyncClient") as mock_client_class:
            _mock_async_client(
                mock_client_class,
                side_effect=httpx.ConnectError("connection refused"),
            )

            with pytest.raises(EmailRequestError, match="request failed"):
                await send_email("re_key", "a@b.com", "me@example.com", "s", "<p>x</p>")


# -----------------------------------------------------------------------------
# ResendEmailDelivery Tests
# -----------------------------------------------------------------------------


class TestResendEmailDelivery:
    """Tests for the ResendEmailDelivery channel."""

    def test_channel_name(self) -> None:
        """Test the channel identifier."""
        channel = ResendEmailDelivery(api_key="re_key", from_address="a@b.com")
        assert channel.channel_name == "email"

    @pytest.mark.asyncio
    async def test_health_check(self) -> None:
        """Health check reflects whether credentials are configured."""
        assert await ResendEmailDelivery(api_key="re_key", from_address="a@b.com").health_check()
        assert not await ResendEmailDelivery(api_key="", from_address="a@b.com").health_check()

    @pytest.mark.asyncio
    async def test_deliver_success(
        self, sample_payload: DeliveryPayload, mock_success_response: MagicMock
    ) -> None:
        """Test successful delivery returns a successful result."""
        channel = ResendEmailDelivery(api_key="re_key", from_address="a@b.com")

        with patch("futurely.delivery.resend.httpx.AsyncClient") as mock_client_class:
            mock_client = _mock_async_client(mock_client_class, response=mock_success_response)

            result = await channel.deliver(sample_payload)

            assert result.success is True
            assert result.channel == "email"
            assert result.error_message is None
            sent = mock_client.post.call_args.kwargs["json"]
            assert sent["subject"] == EMAIL_SUBJECT
            assert sent["to"] == ["me@example.com"]
            assert "Did you finish the marathon?" in sent["html"]

    @pytest.mark.asyncio
    async def test_deliver_without_api_key(self, sample_payload: DeliveryPayload) -> None:
        """Missing configuration fails the send without raising."""
        channel = ResendEmailDelivery(api_key="", from_address="a@b.com")

        result = await channel.deliver(sample_payload)

        assert result.success is False
        assert result.channel == "email"
        assert result.error_message == "RESEND_API_KEY is not set"

    @pytest.mark.asyncio
    async def test_deliver_without_recipient(self, sample_payload: DeliveryPayload) -> None:
        """A letter with no recipient email fails."""
        channel = ResendEmailDelivery(api_key="re_key", from_address="a@b.com")
        payload = sample_payload.model_copy(update={"recipient_email": None})

        result = await channel.deliver(payload)

        assert result.success is False
        assert result.error_message == "No recipient_email on letter"

    @pytest.mark.asyncio
    async def test_deliver_provider_rejection(self, sample_payload: DeliveryPayload) -> None:
        """A provider rejection becomes a failed result with the status code."""
        response = MagicMock()
        response.status_code = 403
        response.is_success = False
        response.text = "Domain not verified"
        channel = ResendEmailDelivery(api_key="re_key", from_address="a@b.com")

        with patch("futurely.delivery.resend.httpx.AsyncClient") as mock_client_class:
            _mock_async_client(mock_client_class, response=response)

            result = await channel.deliver(sample_payload)

        assert result.success is False
        assert result.error_message == "Resend error 403: Domain not verified"

    @pytest.mark.asyncio
    async def test_deliver_unexpected_error(self, sample_payload: DeliveryPayload) -> None:
        """Unexpected exceptions are caught and reported."""
        channel = ResendEmailDelivery(api_key="re_key", from_address="a@b.com")

        with patch("futurely.delivery.resend.httpx.AsyncClient") as mock_client_class:
            _mock_async_client(mock_client_class, side_effect=RuntimeError("boom"))

            result = await channel.deliver(sample_payload)

        assert result.success is False
        assert result.error_message == "Unexpected error: boom"
