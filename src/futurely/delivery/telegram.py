"""Telegram delivery channel using the Bot API sendMessage method."""

from __future__ import annotations

import logging
import re

import httpx

from futurely.delivery.base import DeliveryChannel
from futurely.delivery.schemas import DeliveryPayload, DeliveryResult

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
DEFAULT_SITE_URL = "https://futurely.unbeated.com"

# Telegram rejects messages longer than 4096 characters
TELEGRAM_MESSAGE_LIMIT = 4096
# Room left for the header, salutation, sign-off and footer
MAX_BODY_LENGTH = 3800
ELLIPSIS = "…"

MESSAGE_HEADER = "✦ *Futurely* — A letter from your past has arrived"

_MARKDOWN_V2_SPECIAL = re.compile(r"([\\_*\[\]()~`>#+\-=|{}.!])")
_LINK_URL_SPECIAL = re.compile(r"([\\)])")


class TelegramError(Exception):
    """Base exception for Telegram delivery errors."""

    pass


class TelegramTokenMissingError(TelegramError):
    """Raised when the bot token is not configured."""

    pass


class TelegramRecipientMissingError(TelegramError):
    """Raised when the letter has no Telegram chat id or username."""

    pass


class TelegramRequestError(TelegramError):
    """Raised when the request to the Bot API could not be completed."""

    pass


class TelegramAPIError(TelegramError):
    """Raised when the Bot API answers without ``ok: true``."""

    def __init__(self, description: str, error_code: int | None = None) -> None:
        self.description = description
        self.error_code = error_code
        super().__init__(f"Telegram error: {description}")


def escape_markdown_v2(text: str) -> str:
    """Escape text for Telegram MarkdownV2."""
    return _MARKDOWN_V2_SPECIAL.sub(r"\\\1", text)


def truncate_body(body: str, limit: int = MAX_BODY_LENGTH) -> str:
    """Escape the body and cut it so the escaped text fits within ``limit``.

    The cut is made on the raw text so an escape sequence is never split,
    and the result ends with an ellipsis when anything was dropped.
    """
    escaped = escape_markdown_v2(body)
    if len(escaped) <= limit:
        return escaped

    budget = limit - len(ELLIPSIS)
    pieces: list[str] = []
    size = 0
    for char in body:
        piece = escape_markdown_v2(char)
        if size + len(piece) > budget:
            break
        pieces.append(piece)
        size += len(piece)
    return "".join(pieces) + ELLIPSIS


def build_telegram_message(payload: DeliveryPayload, site_url: str = DEFAULT_SITE_URL) -> str:
    """Compose the MarkdownV2 message for a letter.

    The body gets whatever room the rest of the message leaves under
    TELEGRAM_MESSAGE_LIMIT, capped at MAX_BODY_LENGTH.
    """
    site_label = site_url.removeprefix("https://").removeprefix("http://").rstrip("/")
    link_url = _LINK_URL_SPECIAL.sub(r"\\\1", site_url)
    footer = f"[{escape_markdown_v2(site_label)}]({link_url})"

    before = [
        MESSAGE_HEADER,
        "",
        f"_{escape_markdown_v2(payload.salutation)}_",
        "",
    ]
    after = [
        "",
        f"_{escape_markdown_v2(payload.sign_off)}_",
        "",
        f"*Written:* {escape_markdown_v2(payload.written_on.isoformat())}",
        footer,
    ]

    frame_length = len("\n".join([*before, "", *after]))
    body_limit = min(MAX_BODY_LENGTH, TELEGRAM_MESSAGE_LIMIT - frame_length)
    body = truncate_body(payload.body, body_limit)

    return "\n".join([*before, body, *after])


async def send_telegram_message(
    bot_token: str,
    chat_id: str | None,
    text: str,
    *,
    api_url: str = TELEGRAM_API_URL,
    timeout: float = 30.0,
) -> bool:
    """Send a MarkdownV2 message through the Telegram Bot API.

    Args:
        bot_token: Bot token from @BotFather.
        chat_id: Numeric chat id or @username.
        text: The MarkdownV2 message text.
        api_url: Bot API base URL.
        timeout: Request timeout in seconds.

    Returns:
        True if Telegram reported ``ok``.

    Raises:
        TelegramTokenMissingError: If the bot token is empty.
        TelegramRecipientMissingError: If the chat id is empty.
        TelegramRequestError: On timeouts and transport errors.
        TelegramAPIError: If the response lacks ``ok: true``.
    """
    if not bot_token:
        raise TelegramTokenMissingError("TELEGRAM_BOT_TOKEN is not set")
    if not chat_id:
        raise TelegramRecipientMissingError("No recipient_telegram on letter")

    url = f"{api_url}/bot{bot_token}/sendMessage"
    body = {
        "chat_id": chat_id,
        "text": text,
        "parse_mode": "MarkdownV2",
    }

    # Error messages below never include the URL: it carries the bot token.
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(url, json=body)
    except httpx.TimeoutException as e:
        raise TelegramRequestError("Telegram request timed out") from e
    except httpx.RequestError as e:
        raise TelegramRequestError(f"Telegram request failed: {type(e).__name__}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise TelegramAPIError(
            f"non-JSON response (HTTP {response.status_code})",
            error_code=response.status_code,
        ) from e

    if not isinstance(data, dict) or not data.get("ok"):
        description = data.get("description") if isinstance(data, dict) else None
        error_code = data.get("error_code") if isinstance(data, dict) else None
        raise TelegramAPIError(
            description or f"HTTP {response.status_code}",
            error_code=error_code,
        )

    logger.debug(f"Telegram message sent to chat {chat_id}")
    return True


class TelegramDelivery(DeliveryChannel):
    """Telegram delivery channel backed by a bot."""

    def __init__(
        self,
        bot_token: str,
        *,
        api_url: str = TELEGRAM_API_URL,
        site_url: str = DEFAULT_SITE_URL,
        timeout: float = 30.0,
    ) -> None:
        self.bot_token = bot_token
        self.api_url = api_url
        self.site_url = site_url
        self.timeout = timeout

    @property
    def channel_name(self) -> str:
        """Return the channel identifier."""
        return "telegram"

    async def deliver(self, payload: DeliveryPayload) -> DeliveryResult:
        """Compose the letter as a chat message and send it."""
        try:
            text = build_telegram_message(payload, site_url=self.site_url)
            await send_telegram_message(
                self.bot_token,
                payload.recipient_telegram,
                text,
                api_url=self.api_url,
                timeout=self.timeout,
            )
            return DeliveryResult(success=True, channel=self.channel_name)
        except TelegramError as e:
            logger.error(f"Telegram delivery failed for letter {payload.letter_id}: {e}")
            return DeliveryResult(
                success=False,
                channel=self.channel_name,
                error_message=str(e),
            )
        except Exception as e:
            logger.exception(
                f"Unexpected error delivering letter {payload.letter_id} by Telegram"
            )
            return DeliveryResult(
                success=False,
                channel=self.channel_name,
                error_message=f"Unexpected error: {e}",
            )

    async def health_check(self) -> bool:
        """Check if a bot token is configured."""
        return bool(self.bot_token)
