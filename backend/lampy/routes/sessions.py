"""
Session booking routes (token required). All reads and cancellation are
scoped to the caller; someone else's session id answers 404.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lampy.database import get_db_session
from lampy.dependencies import get_current_user_id
from lampy.schemas.common import ErrorResponse, MessageResponse
from lampy.schemas.session import SessionBookingRequest, SessionResponse
from lampy.services.session_service import session_service

router = APIRouter(
    prefix="/sessions",
    tags=["Sessions"],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.post(
    "/book",
    status_code=201,
    response_model=SessionResponse,
    responses={
        400: {"description": "Bad date format or counsellor unavailable", "model": ErrorResponse},
        404: {"description": "Counsellor not found", "model": ErrorResponse},
    },
    summary="Book a session with a counsellor",
)
async def book_session(
    payload: SessionBookingRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await session_service.book(db, user_id, payload)


@router.get("/", response_model=List[SessionResponse], summary="The caller's sessions, newest first")
async def list_sessions(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[SessionResponse]:
    return await session_service.list_sessions(db, user_id)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
)
async def get_session(
    session_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await session_service.get_session(db, user_id, session_id)


@router.put(
    "/{session_id}/cancel",
    response_model=MessageResponse,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
)
async def cancel_session(
    session_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await session_service.cancel(db, user_id, session_id)
