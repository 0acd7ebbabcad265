"""Database operations for delivery - due-letter selection, state, and the delivery log."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from futurely.core.database import utcnow
from futurely.dispatch.models import DeliveryAttempt
from futurely.letters.models import Letter, LetterStatus

# -----------------------------------------------------------------------------
# Due Letter Selection
# -----------------------------------------------------------------------------


async def get_due_letters(
    session: AsyncSession,
    as_of: date,
) -> list[Letter]:
    """Get all sealed letters whose delivery date is on or before ``as_of``.

    Past-due letters are included: a letter that failed on an earlier run
    stays sealed and is selected again. This is a pure read.

    Args:
        session: The database session.
        as_of: The calendar date of the run.

    Returns:
        List of sealed Letter models that are due.
    """
    stmt = select(Letter).where(
        Letter.status == LetterStatus.SEALED,
        Letter.deliver_on <= as_of,
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


# -----------------------------------------------------------------------------
# Letter State Transitions
# -----------------------------------------------------------------------------


async def mark_letter_delivered(
    session: AsyncSession,
    letter_id: uuid.UUID,
    delivered_at: datetime | None = None,
) -> bool:
    """Transition a letter from sealed to delivered.

    The update only matches a letter that is still sealed, so delivered_at
    is written at most once.

    Args:
        session: The database session.
        letter_id: The letter that was delivered.
        delivered_at: Delivery time. Defaults to now.

    Returns:
        True if the letter was transitioned, False if it was not sealed.
    """
    stmt = (
        update(Letter)
        .where(Letter.id == letter_id, Letter.status == LetterStatus.SEALED)
        .values(status=LetterStatus.DELIVERED, delivered_at=delivered_at or utcnow())
        .execution_options(synchronize_session=False)
    )
    cursor_result = await session.execute(stmt)
    # CursorResult has rowcount, but the async wrapper type doesn't expose it
    rowcount: int = getattr(cursor_result, "rowcount", 0) or 0
    return rowcount > 0


# -----------------------------------------------------------------------------
# Delivery Log
# -----------------------------------------------------------------------------


async def record_delivery_attempt(
    session: AsyncSession,
    letter_id: uuid.UUID,
    channel: str | None,
    success: bool,
    error_message: str | None = None,
) -> DeliveryAttempt:
    """Append a delivery attempt to the log.

    Args:
        session: The database session.
        letter_id: The letter that was attempted.
        channel: The channel value stored on the letter.
        success: Whether the transport accepted the letter.
        error_message: Failure detail, if any.

    Returns:
        The created DeliveryAttempt.
    """
    attempt = DeliveryAttempt(
        letter_id=letter_id,
        channel=channel,
        success=success,
        error_message=error_message,
        attempted_at=utcnow(),
    )
    session.add(attempt)
    await session.flush()
    return attempt


async def list_attempts_for_letter(
    session: AsyncSession,
    letter_id: uuid.UUID,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[DeliveryAttempt], int]:
    """List delivery attempts for a letter with pagination.

    Args:
        session: The database session.
        letter_id: The letter to list attempts for.
        skip: Number of records to skip.
        limit: Maximum number of records to return.

    Returns:
        A tuple of (attempts list, total count).
    """
    count_stmt = (
        select(func.count())
        .select_from(DeliveryAttempt)
        .where(DeliveryAttempt.letter_id == letter_id)
    )
    total = await session.scalar(count_stmt) or 0

    stmt = (
        select(DeliveryAttempt)
        .where(DeliveryAttempt.letter_id == letter_id)
        .order_by(DeliveryAttempt.attempted_at.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await session.execute(stmt)
    attempts = list(result.scalars().all())

    return attempts, total
