"""Business logic for letter CRUD, sealing, and vault statistics."""

import uuid

import structlog
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from futurely.core.database import utcnow
from futurely.letters.models import Letter, LetterStatus
from futurely.letters.schemas import LetterCreate, LetterUpdate, NextDelivery, VaultStats

log = structlog.get_logger()

# Fields a draft edit may clear by sending null
NULLABLE_UPDATE_FIELDS = frozenset(
    {"salutation", "sign_off", "recipient_name", "recipient_email", "recipient_telegram"}
)


class LetterStateError(Exception):
    """Raised when an operation is not allowed in the letter's current state."""

    pass


async def get_letter_by_id(
    session: AsyncSession,
    letter_id: uuid.UUID,
    user_id: uuid.UUID,
) -> Letter | None:
    """Get a single letter by ID, ensuring it belongs to the user."""
    result = await session.execute(
        select(Letter).where(Letter.id == letter_id, Letter.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_letters_for_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    status: LetterStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Letter], int]:
    """List a user's letters, newest first, optionally filtered by status."""
    filters = [Letter.user_id == user_id]
    if status is not None:
        filters.append(Letter.status == status)

    count_result = await session.execute(
        select(func.count()).select_from(Letter).where(*filters)
    )
    total = count_result.scalar_one()

    result = await session.execute(
        select(Letter)
        .where(*filters)
        .order_by(Letter.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    items = list(result.scalars().all())

    return items, total


async def create_letter(
    session: AsyncSession,
    user_id: uuid.UUID,
    data: LetterCreate,
) -> Letter:
    """Save a new letter as a draft."""
    values = data.model_dump()
    values["delivery_channel"] = data.delivery_channel.value
    letter = Letter(user_id=user_id, status=LetterStatus.DRAFT, **values)
    session.add(letter)
    await session.commit()
    await session.refresh(letter)

    log.info("Letter drafted", letter_id=str(letter.id), channel=letter.delivery_channel)
    return letter


async def update_letter(
    session: AsyncSession,
    letter: Letter,
    data: LetterUpdate,
) -> Letter:
    """Edit a draft letter.

    Raises:
        LetterStateError: If the letter is no longer a draft.
    """
    if letter.status != LetterStatus.DRAFT:
        raise LetterStateError("Only drafts can be edited; this letter is sealed in the vault")

    update_data = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_UPDATE_FIELDS
    }
    if update_data.get("delivery_channel") is not None:
        update_data["delivery_channel"] = update_data["delivery_channel"].value

    for field, value in update_data.items():
        setattr(letter, field, value)

    await session.commit()
    await session.refresh(letter)
    return letter


async def seal_letter(
    session: AsyncSession,
    letter: Letter,
) -> Letter:
    """Seal a draft so it is queued for delivery on its deliver_on date.

    Raises:
        LetterStateError: If the letter is already sealed or delivered, has
            an empty body, or lacks a recipient for its delivery channel.
    """
    if letter.status == LetterStatus.SEALED:
        raise LetterStateError("Letter is already sealed")
    if letter.status == LetterStatus.DELIVERED:
        raise LetterStateError("Letter has already been delivered")
    if not (letter.body or "").strip():
        raise LetterStateError("Cannot seal an empty letter")
    if not letter.recipient_for_channel():
        raise LetterStateError(
            f"A recipient is required for {letter.delivery_channel} delivery before sealing"
        )

    letter.status = LetterStatus.SEALED
    letter.sealed_at = utcnow()
    await session.commit()
    await session.refresh(letter)

    log.info(
        "Letter sealed",
        letter_id=str(letter.id),
        channel=letter.delivery_channel,
        deliver_on=letter.deliver_on.isoformat(),
    )
    return letter


async def delete_letter(
    session: AsyncSession,
    letter: Letter,
) -> None:
    """Delete a draft letter.

    Raises:
        LetterStateError: If the letter is sealed or delivered.
    """
    if letter.status == LetterStatus.SEALED:
        raise LetterStateError("Sealed letters are locked in the vault and cannot be deleted")
    if letter.status == LetterStatus.DELIVERED:
        raise LetterStateError("Delivered letters are kept with their delivery history")

    await session.delete(letter)
    await session.commit()


async def get_vault_stats(
    session: AsyncSession,
    user_id: uuid.UUID,
) -> VaultStats:
    """Get letter counts by status and the next upcoming delivery."""
    result = await session.execute(
        select(
            func.count().label("total"),
            func.count(case((Letter.status == LetterStatus.DRAFT, 1))).label("draft"),
            func.count(case((Letter.status == LetterStatus.SEALED, 1))).label("sealed"),
            func.count(case((Letter.status == LetterStatus.DELIVERED, 1))).label("delivered"),
        ).where(Letter.user_id == user_id)
    )
    row = result.one()

    next_result = await session.execute(
        select(Letter)
        .where(Letter.user_id == user_id, Letter.status == LetterStatus.SEALED)
        .order_by(Letter.deliver_on.asc())
        .limit(1)
    )
    next_letter = next_result.scalar_one_or_none()

    return VaultStats(
        total=row.total,
        draft=row.draft,
        sealed=row.sealed,
        delivered=row.delivered,
        next_delivery=NextDelivery.model_validate(next_letter) if next_letter else None,
    )
