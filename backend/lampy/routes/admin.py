"""
LAMPY Backend - Admin Routes
============================

What:  Counsellor creation and the verification review queue.

WARNING: these endpoints are NOT authenticated. They are meant to be reachable
only from a trusted internal network; put them behind an admin credential
before exposing the API publicly.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lampy.database import get_db_session
from lampy.schemas.common import ErrorResponse, MessageResponse
from lampy.schemas.counsellor import CounsellorCreate, CounsellorResponse
from lampy.schemas.verification import RejectionRequest, VerificationResponse
from lampy.services.counsellor_service import counsellor_service
from lampy.services.verification_service import verification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/counsellors", status_code=201, response_model=CounsellorResponse)
async def create_counsellor(
    payload: CounsellorCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CounsellorResponse:
    return await counsellor_service.create(db, payload)


@router.get(
    "/verifications",
    response_model=List[VerificationResponse],
    summary="All verification requests, newest first",
)
async def list_verifications(db: AsyncSession = Depends(get_db_session)) -> List[VerificationResponse]:
    return await verification_service.list_requests(db)


@router.post(
    "/verifications/{verification_id}/approve",
    response_model=MessageResponse,
    responses={
        404: {"description": "Verification request not found", "model": ErrorResponse},
        409: {"description": "Request already approved or rejected", "model": ErrorResponse},
    },
)
async def approve_verification(
    verification_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await verification_service.approve(db, verification_id)


@router.post(
    "/verifications/{verification_id}/reject",
    response_model=MessageResponse,
    responses={
        400: {"description": "Rejection reason missing", "model": ErrorResponse},
        404: {"description": "Verification request not found", "model": ErrorResponse},
        409: {"description": "Request already approved or rejected", "model": ErrorResponse},
    },
)
async def reject_verification(
    verification_id: int,
    payload: RejectionRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await verification_service.reject(db, verification_id, payload.reason)
