"""Daily delivery run - hands every due letter to its channel and logs the outcome.

The run flow:
1. Select sealed letters with deliver_on on or before the run date
2. Snapshot them so later commits and rollbacks never touch the working set
3. For each letter, independently:
   a. Resolve the delivery channel (unknown channels fail the letter)
   b. Deliver
   c. On success, transition the letter to delivered
   d. Append a delivery attempt, whatever the outcome
4. Return the counts

Delivery is at-least-once. The provider is called before the letter is
updated, and the two are not atomic: if the provider accepted the letter
but the update fails, the letter stays sealed and is sent again on the next
run. A failed letter is likewise retried on every run until it succeeds.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import structlog

from futurely.delivery.schemas import DeliveryResult
from futurely.dispatch import service as delivery_service
from futurely.dispatch.factories import UnsupportedChannelError, create_delivery_channel
from futurely.dispatch.schemas import DeliveryRunSummary, DueLetter

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from futurely.core.config import Settings


log = structlog.get_logger()


async def dispatch_letter(letter: DueLetter, config: Settings) -> DeliveryResult:
    """Send one letter through its channel.

    Never raises: an unknown channel or an unexpected transport exception
    becomes a failed DeliveryResult.

    Args:
        letter: The due letter.
        config: Settings supplying provider credentials.

    Returns:
        The DeliveryResult for this attempt.
    """
    try:
        channel = create_delivery_channel(letter.delivery_channel, config)
    except UnsupportedChannelError as e:
        return DeliveryResult(
            success=False,
            channel=letter.delivery_channel,
            error_message=str(e),
        )

    try:
        return await channel.deliver(letter.to_payload())
    except Exception as e:
        return DeliveryResult(
            success=False,
            channel=channel.channel_name,
            error_message=f"Unexpected error: {e}",
        )


async def deliver_letter(
    session: AsyncSession,
    letter: DueLetter,
    config: Settings,
) -> bool:
    """Deliver one letter, update its state, and record the attempt.

    Store errors are contained here so the rest of the batch continues.

    Args:
        session: The database session.
        letter: The due letter.
        config: Settings supplying provider credentials.

    Returns:
        True if the provider accepted the letter.
    """
    result = await dispatch_letter(letter, config)
    error_message = result.error_message

    if result.success:
        try:
            transitioned = await delivery_service.mark_letter_delivered(session, letter.id)
            await session.commit()
        except Exception as e:
            # The letter has already left; keep the send and let the next run resend it.
            await session.rollback()
            error_message = f"Delivered, but marking the letter delivered failed: {e}"
            log.error(
                "Letter state update failed after delivery",
                letter_id=str(letter.id),
                channel=letter.delivery_channel,
                error=str(e),
            )
        else:
            if not transitioned:
                log.warning("Delivered letter was no longer sealed", letter_id=str(letter.id))
            log.info(
                "Letter delivered",
                letter_id=str(letter.id),
                channel=letter.delivery_channel,
            )
    else:
        log.warning(
            "Letter delivery failed",
            letter_id=str(letter.id),
            channel=letter.delivery_channel,
            error=error_message,
        )

    try:
        await delivery_service.record_delivery_attempt(
            session,
            letter.id,
            letter.delivery_channel,
            success=result.success,
            error_message=error_message,
        )
        await session.commit()
    except Exception as e:
        await session.rollback()
        log.error(
            "Failed to record delivery attempt",
            letter_id=str(letter.id),
            success=result.success,
            error=str(e),
        )

    return result.success


async def run_daily_delivery(
    session: AsyncSession,
    current_date: date,
    config: Settings,
) -> DeliveryRunSummary:
    """Deliver every sealed letter due on or before ``current_date``.

    Args:
        session: The database session.
        current_date: The calendar date of this run.
        config: Settings supplying provider credentials.

    Returns:
        Counts of due, delivered, and failed letters.

    Raises:
        Exception: Any store error while selecting due letters. Nothing is
            dispatched in that case.
    """
    letters = await delivery_service.get_due_letters(session, current_date)
    due_letters = [DueLetter.model_validate(letter) for letter in letters]

    log.info(
        "Delivery run started",
        run_date=current_date.isoformat(),
        due=len(due_letters),
    )

    delivered = 0
    failed = 0
    for letter in due_letters:
        if await deliver_letter(session, letter, config):
            delivered += 1
        else:
            failed += 1

    summary = DeliveryRunSummary(
        run_date=current_date,
        due=len(due_letters),
        delivered=delivered,
        failed=failed,
    )
    log.info(
        "Delivery run complete",
        run_date=current_date.isoformat(),
        due=summary.due,
        delivered=summary.delivered,
        failed=summary.failed,
    )
    return summary
