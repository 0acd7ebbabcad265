"""API routes for the pre-launch waitlist."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from futurely.auth.service import get_async_session
from futurely.waitlist import service as waitlist_service
from futurely.waitlist.schemas import WaitlistJoin, WaitlistResponse

router = APIRouter(prefix="/api/v1/waitlist", tags=["waitlist"])

AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]


@router.post("", response_model=WaitlistResponse, status_code=status.HTTP_201_CREATED)
async def join_waitlist(
    data: WaitlistJoin,
    session: AsyncSessionDep,
    response: Response,
) -> WaitlistResponse:
    """Join the waitlist. Joining twice is not an error."""
    created = await waitlist_service.join_waitlist(session, data)
    if not created:
        response.status_code = status.HTTP_200_OK
        return WaitlistResponse(already_joined=True, message="You're already on the waitlist!")

    return WaitlistResponse(
        already_joined=False,
        message="Welcome to Futurely! We'll be in touch soon.",
    )
