"""Email delivery channel using the Resend transactional email API."""

from __future__ import annotations

import logging

import httpx
from jinja2 import Environment, StrictUndefined

from futurely.delivery.base import DeliveryChannel
from futurely.delivery.schemas import DeliveryPayload, DeliveryResult

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"
DEFAULT_SITE_URL = "https://futurely.unbeated.com"
EMAIL_SUBJECT = "✦ A letter from your past has arrived"

# Autoescaping covers & < > " ' in every interpolated value
_jinja_env = Environment(autoescape=True, undefined=StrictUndefined)

LETTER_EMAIL_TEMPLATE = _jinja_env.from_string(
    """<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8"/>
<meta name="viewport" content="width=device-width,initial-scale=1"/>
<style>
  body{background:#0b0f1a;margin:0;padding:40px 20px;font-family:Georgia,serif;}
  .wrap{max-width:600px;margin:0 auto;}
  .header{text-align:center;margin-bottom:32px;}
  .logo{color:#d4a843;font-size:28px;font-style:italic;letter-spacing:0.1em;}
  .tagline{color:#7a5f22;font-size:11px;letter-spacing:0.3em;text-transform:uppercase;margin-top:6px;}
  .gold-line{height:1px;background:linear-gradient(90deg,transparent,#d4a843,transparent);margin:20px 0;}
  .paper{background:#f7f0e0;padding:48px 52px;border-top:3px solid #d4a843;}
  .to-label{font-size:11px;letter-spacing:0.25em;color:#7a5f22;text-transform:uppercase;margin-bottom:20px;font-family:monospace;}
  .body{font-size:16px;line-height:2.1;color:#1a1008;white-space:pre-wrap;}
  .sig{font-size:20px;font-style:italic;color:#7a5f22;margin-top:28px;}
  .footer{text-align:center;margin-top:32px;}
  .footer p{color:#2a3a5c;font-size:11px;letter-spacing:0.15em;font-family:monospace;text-transform:uppercase;}
  .footer a{color:#7a5f22;text-decoration:none;}
</style>
</head>
<body>
<div class="wrap">
  <div class="header">
    <div class="logo">Futurely</div>
    <div class="tagline">A letter from your past has arrived</div>
    <div class="gold-line"></div>
  </div>
  <div class="paper">
    <div class="to-label">{{ salutation }}</div>
    <div class="body">{{ body }}</div>
    <div class="sig">{{ sign_off }}</div>
  </div>
  <div class="footer">
    <div class="gold-line"></div>
    <p>Delivered by <a href="{{ site_url }}">Futurely</a>
       &nbsp;&middot;&nbsp; Written {{ written_on }}
       &nbsp;&middot;&nbsp; Delivered today</p>
  </div>
</div>
</body>
</html>"""
)


class EmailError(Exception):
    """Base exception for email delivery errors."""

    pass


class EmailAPIKeyMissingError(EmailError):
    """Raised when the Resend API key is not configured."""

    pass


class EmailSenderMissingError(EmailError):
    """Raised when no sender address is configured."""

    pass


class EmailRecipientMissingError(EmailError):
    """Raised when the letter has no recipient email address."""

    pass


class EmailRequestError(EmailError):
    """Raised when the request to Resend could not be completed."""

    pass


class ResendAPIError(EmailError):
    """Raised when Resend rejects the request."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(f"Resend error {status_code}: {message}")


def render_letter_html(payload: DeliveryPayload, site_url: str = DEFAULT_SITE_URL) -> str:
    """Render a letter into the HTML email document.

    Args:
        payload: The letter to render.
        site_url: Link target for the footer.

    Returns:
        The full HTML document with all letter text escaped.
    """
    return LETTER_EMAIL_TEMPLATE.render(
        salutation=payload.salutation,
        body=payload.body,
        sign_off=payload.sign_off,
        written_on=payload.written_on.isoformat(),
        site_url=site_url,
    )


async def send_email(
    api_key: str,
    from_address: str,
    to: str | None,
    subject: str,
    html: str,
    *,
    api_url: str = RESEND_EMAILS_URL,
    timeout: float = 30.0,
) -> bool:
    """Send an HTML email through Resend.

    Args:
        api_key: Resend API key.
        from_address: Sender, e.g. ``Futurely <letters@example.com>``.
        to: Recipient address.
        subject: Subject line.
        html: HTML body.
        api_url: Resend emails endpoint.
        timeout: Request timeout in seconds.

    Returns:
        True if Resend accepted the message.

    Raises:
        EmailAPIKeyMissingError: If the API key is empty.
        EmailSenderMissingError: If the sender is empty.
        EmailRecipientMissingError: If the recipient is empty.
        EmailRequestError: On timeouts and transport errors.
        ResendAPIError: If Resend returns a non-success status.
    """
    if not api_key:
        raise EmailAPIKeyMissingError("RESEND_API_KEY is not set")
    if not from_address:
        raise EmailSenderMissingError("FROM_EMAIL is not set")
    if not to:
        raise EmailRecipientMissingError("No recipient_email on letter")

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    body = {
        "from": from_address,
        "to": [to],
        "subject": subject,
        "html": html,
    }

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(api_url, json=body, headers=headers)
    except httpx.TimeoutException as e:
        raise EmailRequestError(f"Resend request timed out: {e}") from e
    except httpx.RequestError as e:
        raise EmailRequestError(f"Resend request failed: {e}") from e

    if not response.is_success:
        raise ResendAPIError(
            response.status_code,
            response.text[:500] if response.text else "Unknown error",
        )

    logger.debug(f"Resend accepted email to {to}")
    return True


class ResendEmailDelivery(DeliveryChannel):
    """Email delivery channel backed by Resend."""

    def __init__(
        self,
        api_key: str,
        from_address: str,
        *,
        api_url: str = RESEND_EMAILS_URL,
        site_url: str = DEFAULT_SITE_URL,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the email delivery channel.

        Credentials are not validated here; a missing value fails the
        individual send that needs it.
        """
        self.api_key = api_key
        self.from_address = from_address
        self.api_url = api_url
        self.site_url = site_url
        self.timeout = timeout

    @property
    def channel_name(self) -> str:
        """Return the channel identifier."""
        return "email"

    async def deliver(self, payload: DeliveryPayload) -> DeliveryResult:
        """Render the letter and send it through Resend."""
        try:
            html = render_letter_html(payload, site_url=self.site_url)
            await send_email(
                self.api_key,
                self.from_address,
                payload.recipient_email,
                EMAIL_SUBJECT,
                html,
                api_url=self.api_url,
                timeout=self.timeout,
            )
            return DeliveryResult(success=True, channel=self.channel_name)
        except EmailError as e:
            logger.error(f"Email delivery failed for letter {payload.letter_id}: {e}")
            return DeliveryResult(
                success=False,
                channel=self.channel_name,
                error_message=str(e),
            )
        except Exception as e:
            logger.exception(f"Unexpected error delivering letter {payload.letter_id} by email")
            return DeliveryResult(
                success=False,
                channel=self.channel_name,
                error_message=f"Unexpected error: {e}",
            )

    async def health_check(self) -> bool:
        """Check if Resend credentials and a sender are configured."""
        return bool(self.api_key and self.from_address)
