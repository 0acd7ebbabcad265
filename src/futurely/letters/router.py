"""API routes for letter CRUD, sealing, and vault statistics."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from futurely.auth.dependencies import current_user
from futurely.auth.models import User
from futurely.auth.service import get_async_session
from futurely.letters import service as letter_service
from futurely.letters.models import Letter, LetterStatus
from futurely.letters.schemas import (
    LetterCreate,
    LetterCreatedResponse,
    LetterListResponse,
    LetterResponse,
    LetterUpdate,
    SealLetterResponse,
    VaultStats,
)
from futurely.letters.service import LetterStateError

router = APIRouter(prefix="/api/v1", tags=["letters"])

AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]
CurrentUserDep = Annotated[User, Depends(current_user)]


async def _get_owned_letter(
    session: AsyncSession,
    letter_id: uuid.UUID,
    user: User,
) -> Letter:
    letter = await letter_service.get_letter_by_id(session, letter_id, user.id)
    if not letter:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Letter not found",
        )
    return letter


@router.get("/letters", response_model=LetterListResponse)
async def list_letters(
    session: AsyncSessionDep,
    user: CurrentUserDep,
    letter_status: Annotated[LetterStatus | None, Query(alias="status")] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> LetterListResponse:
    """List the current user's letters, newest first."""
    items, total = await letter_service.list_letters_for_user(
        session, user.id, status=letter_status, skip=skip, limit=limit
    )
    return LetterListResponse(
        items=[LetterResponse.model_validate(item) for item in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post(
    "/letters",
    response_model=LetterCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_letter(
    data: LetterCreate,
    session: AsyncSessionDep,
    user: CurrentUserDep,
) -> LetterCreatedResponse:
    """Save a new letter as a draft."""
    letter = await letter_service.create_letter(session, user.id, data)
    return LetterCreatedResponse(letter=LetterResponse.model_validate(letter))


@router.get("/letters/{letter_id}", response_model=LetterResponse)
async def get_letter(
    letter_id: uuid.UUID,
    session: AsyncSessionDep,
    user: CurrentUserDep,
) -> LetterResponse:
    """Get a single letter by ID."""
    letter = await _get_owned_letter(session, letter_id, user)
    return LetterResponse.model_validate(letter)


@router.patch("/letters/{letter_id}", response_model=LetterResponse)
async def update_letter(
    letter_id: uuid.UUID,
    data: LetterUpdate,
    session: AsyncSessionDep,
    user: CurrentUserDep,
) -> LetterResponse:
    """Edit a draft letter."""
    letter = await _get_owned_letter(session, letter_id, user)
    try:
        updated = await letter_service.update_letter(session, letter, data)
    except LetterStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return LetterResponse.model_validate(updated)


@router.patch("/letters/{letter_id}/seal", response_model=SealLetterResponse)
async def seal_letter(
    letter_id: uuid.UUID,
    session: AsyncSessionDep,
    user: CurrentUserDep,
) -> SealLetterResponse:
    """Seal a letter, locking it until its delivery date."""
    letter = await _get_owned_letter(session, letter_id, user)
    try:
        sealed = await letter_service.seal_letter(session, letter)
    except LetterStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return SealLetterResponse(
        letter=LetterResponse.model_validate(sealed),
        message=(
            f"Letter sealed! It will arrive via {sealed.delivery_channel} "
            f"on {sealed.deliver_on.isoformat()}"
        ),
    )


@router.delete("/letters/{letter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_letter(
    letter_id: uuid.UUID,
    session: AsyncSessionDep,
    user: CurrentUserDep,
) -> None:
    """Delete a draft letter."""
    letter = await _get_owned_letter(session, letter_id, user)
    try:
        await letter_service.delete_letter(session, letter)
    except LetterStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/vault/stats", response_model=VaultStats)
async def vault_stats(
    session: AsyncSessionDep,
    user: CurrentUserDep,
) -> VaultStats:
    """Summary counts of the current user's letters."""
    return await letter_service.get_vault_stats(session, user.id)
