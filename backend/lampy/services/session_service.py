"""
LAMPY Backend - Session Booking Service
=======================================

What:  Book, list, fetch and cancel counselling sessions for the caller.

Booking checks, in order:
    1. session_date parses as UTC "YYYY-MM-DDTHH:MM:SS[.ffffff]Z"  → else 400
    2. counsellor exists                                            → else 404
    3. counsellor is available                                      → else 400
    Nothing is written unless all three pass.

Ownership:
    Every read and the cancel query filter on the caller's user id. Another
    user's session id answers 404, exactly like a non-existent one.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lampy.exceptions import DatabaseError, NotFoundError, ValidationError
from lampy.models.session import SESSION_CANCELLED, SESSION_PENDING, CounsellingSession
from lampy.schemas.common import MessageResponse
from lampy.schemas.session import SessionBookingRequest, SessionResponse
from lampy.services.counsellor_service import counsellor_service

logger = logging.getLogger(__name__)

SESSION_DATE_FORMATS = ("%Y-%m-%dT%H:%M:%SZ", "%Y-%m-%dT%H:%M:%S.%fZ")


def parse_session_date(value: str) -> datetime:
    """
    Parse a strict UTC timestamp.

    "2025-03-01T10:00:00Z" and "2025-03-01T10:00:00.500Z" are accepted;
    offsets ("+05:30"), missing "Z", date-only and free text are not.

    Raises:
        ValidationError
    """
    for fmt in SESSION_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except (TypeError, ValueError):
            continue
    raise ValidationError(
        message="Invalid session date format. Use ISO-8601 UTC, e.g. 2025-03-01T10:00:00Z",
        field="session_date",
    )


class SessionService:

    async def book(
        self,
        db: AsyncSession,
        user_id: int,
        payload: SessionBookingRequest,
    ) -> SessionResponse:
        session_date = parse_session_date(payload.session_date)

        counsellor = await counsellor_service.get_counsellor(db, payload.counsellor_id)
        if not counsellor.available:
            raise ValidationError(
                message="Counsellor is not available",
                field="counsellor_id",
                context={"counsellor_id": counsellor.id},
            )

        session = CounsellingSession(
            user_id=user_id,
            counsellor_id=counsellor.id,
            counsellor=counsellor,
            session_date=session_date,
            duration=payload.duration,
            status=SESSION_PENDING,
            notes=payload.notes,
        )
        db.add(session)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to book session for user %s: %s", user_id, str(e))
            raise DatabaseError(message="Failed to book session", context={"user_id": user_id})

        logger.info(
            "Session %s booked (user=%s, counsellor=%s, date=%s)",
            session.id, user_id, counsellor.id, session_date.isoformat(),
        )
        return SessionResponse.model_validate(session)

    async def list_sessions(self, db: AsyncSession, user_id: int) -> List[SessionResponse]:
        """The caller's sessions, latest session_date first."""
        try:
            result = await db.execute(
                select(CounsellingSession)
                .options(selectinload(CounsellingSession.counsellor))
                .where(CounsellingSession.user_id == user_id)
                .order_by(CounsellingSession.session_date.desc(), CounsellingSession.id.desc())
            )
            sessions = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch sessions for user %s: %s", user_id, str(e))
            raise DatabaseError(message="Failed to fetch sessions")
        return [SessionResponse.model_validate(s) for s in sessions]

    async def _get_owned(self, db: AsyncSession, user_id: int, session_id: int) -> CounsellingSession:
        try:
            result = await db.execute(
                select(CounsellingSession)
                .options(selectinload(CounsellingSession.counsellor))
                .where(
                    CounsellingSession.id == session_id,
                    CounsellingSession.user_id == user_id,
                )
            )
            session = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to load session %s: %s", session_id, str(e))
            raise DatabaseError(context={"session_id": session_id})
        if session is None:
            raise NotFoundError(resource="Session", resource_id=session_id)
        return session

    async def get_session(self, db: AsyncSession, user_id: int, session_id: int) -> SessionResponse:
        return SessionResponse.model_validate(await self._get_owned(db, user_id, session_id))

    async def cancel(self, db: AsyncSession, user_id: int, session_id: int) -> MessageResponse:
        """
        Overwrite the status with "cancelled", whatever it was.

        Cancelling an already cancelled session succeeds again.
        """
        session = await self._get_owned(db, user_id, session_id)
        session.status = SESSION_CANCELLED
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to cancel session %s: %s", session_id, str(e))
            raise DatabaseError(message="Failed to cancel session")

        logger.info("Session %s cancelled by user %s", session_id, user_id)
        return MessageResponse(message="Session cancelled successfully")


session_service = SessionService()
