"""
LAMPY Backend - Counsellor Directory
====================================

What:  Listing, lookup, preference-based recommendation and admin creation
       of counsellors.

Specialty matching:
    Specialties are stored as a JSON list. Matching is done per entry, with
    exact (whitespace-trimmed) string equality, after loading the available
    counsellors. A filter for "Stress" does not match "Stress Management".

    - Listing with ?specialties=a,b  → counsellors holding every listed entry
    - Recommendation                 → counsellors holding any preference

The directory is small and read-mostly, so filtering in Python keeps the
behaviour identical on SQLite and PostgreSQL.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lampy.exceptions import DatabaseError, NotFoundError
from lampy.models.counsellor import Counsellor
from lampy.schemas.counsellor import CounsellorCreate, CounsellorResponse
from lampy.services.user_service import user_service

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 10


def parse_specialties(raw: Optional[str]) -> List[str]:
    """"Anxiety, Stress Management,," → ["Anxiety", "Stress Management"]."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _entries(counsellor: Counsellor) -> set:
    return {s.strip() for s in (counsellor.specialties or []) if isinstance(s, str)}


def has_all(counsellor: Counsellor, wanted: Iterable[str]) -> bool:
    return set(wanted) <= _entries(counsellor)


def has_any(counsellor: Counsellor, wanted: Iterable[str]) -> bool:
    return not _entries(counsellor).isdisjoint(wanted)


class CounsellorService:

    async def _available(self, db: AsyncSession) -> Sequence[Counsellor]:
        try:
            result = await db.execute(
                select(Counsellor)
                .where(Counsellor.available.is_(True))
                .order_by(Counsellor.rating.desc(), Counsellor.id.asc())
            )
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch counsellors: %s", str(e))
            raise DatabaseError(message="Failed to fetch counsellors")

    async def list_counsellors(
        self,
        db: AsyncSession,
        specialties: Optional[str] = None,
    ) -> List[CounsellorResponse]:
        """Available counsellors, best rated first, optionally filtered by specialty."""
        wanted = parse_specialties(specialties)
        counsellors = await self._available(db)
        if wanted:
            counsellors = [c for c in counsellors if has_all(c, wanted)]
        return [CounsellorResponse.model_validate(c) for c in counsellors]

    async def get_counsellor(self, db: AsyncSession, counsellor_id: int) -> Counsellor:
        """
        Any counsellor by id, available or not.

        Raises:
            NotFoundError
        """
        try:
            counsellor = await db.get(Counsellor, counsellor_id)
        except SQLAlchemyError as e:
            logger.error("Failed to load counsellor %s: %s", counsellor_id, str(e))
            raise DatabaseError(context={"counsellor_id": counsellor_id})
        if counsellor is None:
            raise NotFoundError(resource="Counsellor", resource_id=counsellor_id)
        return counsellor

    async def recommended(self, db: AsyncSession, user_id: int) -> List[CounsellorResponse]:
        """
        Up to MAX_RECOMMENDATIONS available counsellors for the caller.

        With stored preferences, only counsellors sharing at least one
        specialty with them qualify. Without preferences every available
        counsellor qualifies. Either way the best rated come first.
        """
        user = await user_service.get_user(db, user_id)
        preferences = [p.strip() for p in (user.consultation_preferences or []) if p and p.strip()]

        counsellors = await self._available(db)
        if preferences:
            counsellors = [c for c in counsellors if has_any(c, preferences)]

        return [CounsellorResponse.model_validate(c) for c in counsellors[:MAX_RECOMMENDATIONS]]

    async def create(self, db: AsyncSession, payload: CounsellorCreate) -> CounsellorResponse:
        data = payload.model_dump()
        data["specialties"] = [s.strip() for s in data["specialties"] if s.strip()]
        counsellor = Counsellor(**data)
        db.add(counsellor)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to create counsellor: %s", str(e))
            raise DatabaseError(message="Failed to create counsellor")

        logger.info("Counsellor created: id=%s", counsellor.id)
        return CounsellorResponse.model_validate(counsellor)


counsellor_service = CounsellorService()
