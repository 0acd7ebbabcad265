"""API routes for reading a letter's delivery log."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from futurely.auth.dependencies import current_user
from futurely.auth.models import User
from futurely.auth.service import get_async_session
from futurely.dispatch import service as delivery_service
from futurely.dispatch.schemas import DeliveryAttemptListResponse, DeliveryAttemptResponse
from futurely.letters import service as letter_service

router = APIRouter(prefix="/api/v1", tags=["deliveries"])

AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]
CurrentUserDep = Annotated[User, Depends(current_user)]


@router.get(
    "/letters/{letter_id}/deliveries",
    response_model=DeliveryAttemptListResponse,
)
async def list_deliveries(
    letter_id: uuid.UUID,
    session: AsyncSessionDep,
    user: CurrentUserDep,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> DeliveryAttemptListResponse:
    """List delivery attempts for one of the current user's letters."""
    letter = await letter_service.get_letter_by_id(session, letter_id, user.id)
    if not letter:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Letter not found",
        )

    attempts, total = await delivery_service.list_attempts_for_letter(
        session, letter_id, skip=skip, limit=limit
    )
    return DeliveryAttemptListResponse(
        items=[DeliveryAttemptResponse.model_validate(a) for a in attempts],
        total=total,
        skip=skip,
        limit=limit,
    )
