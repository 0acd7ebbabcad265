"""Business logic for waitlist signups."""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from futurely.waitlist.models import WaitlistEntry
from futurely.waitlist.schemas import WaitlistJoin

log = structlog.get_logger()


def normalize_email(email: str) -> str:
    """Lowercase and strip an email address for uniqueness checks."""
    return email.strip().lower()


async def get_entry_by_email(session: AsyncSession, email: str) -> WaitlistEntry | None:
    """Get a waitlist entry by normalized email."""
    result = await session.execute(
        select(WaitlistEntry).where(WaitlistEntry.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def join_waitlist(session: AsyncSession, data: WaitlistJoin) -> bool:
    """Add an email to the waitlist.

    Returns:
        True if a new entry was created, False if the email was already present.
    """
    email = normalize_email(data.email)
    if await get_entry_by_email(session, email):
        return False

    session.add(WaitlistEntry(email=email, name=data.name))
    try:
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same address
        await session.rollback()
        return False

    log.info("Waitlist signup", email=email)
    return True
