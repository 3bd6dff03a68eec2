"""
Counsellor directory routes (token required).

`/recommended` is declared before `/{counsellor_id}` so it is not captured
by the path parameter.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lampy.database import get_db_session
from lampy.dependencies import get_current_user_id
from lampy.schemas.common import ErrorResponse
from lampy.schemas.counsellor import CounsellorResponse
from lampy.services.counsellor_service import counsellor_service

router = APIRouter(
    prefix="/counsellors",
    tags=["Counsellors"],
    dependencies=[Depends(get_current_user_id)],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.get("/", response_model=List[CounsellorResponse], summary="List available counsellors")
async def list_counsellors(
    specialties: Optional[str] = Query(
        default=None,
        description="Comma-separated specialties; a counsellor must hold all of them",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[CounsellorResponse]:
    return await counsellor_service.list_counsellors(db, specialties)


@router.get(
    "/recommended",
    response_model=List[CounsellorResponse],
    summary="Counsellors matching the caller's consultation preferences",
)
async def recommended_counsellors(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[CounsellorResponse]:
    return await counsellor_service.recommended(db, user_id)


@router.get(
    "/{counsellor_id}",
    response_model=CounsellorResponse,
    responses={404: {"description": "Counsellor not found", "model": ErrorResponse}},
)
async def get_counsellor(
    counsellor_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> CounsellorResponse:
    counsellor = await counsellor_service.get_counsellor(db, counsellor_id)
    return CounsellorResponse.model_validate(counsellor)
