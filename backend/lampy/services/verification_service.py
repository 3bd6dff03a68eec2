"""
LAMPY Backend - Verification Workflow
=====================================

What:  User-submitted verification artifacts and their admin adjudication.

Workflow:
    ┌──────────────┐   upload    ┌─────────┐  approve  ┌──────────┐
    │ verify-photo │────────────▶│ pending │──────────▶│ approved │ + user flag
    │ verify-age   │             └─────────┘           └──────────┘
    └──────────────┘                  │       reject   ┌──────────┐
                                      └───────────────▶│ rejected │ + reason
                                                       └──────────┘

    - Each upload stores the file, records its path on the user row and adds
      a pending request. A re-submission is just another pending request.
    - Only pending requests can be adjudicated; a second decision is a 409.
    - Approval updates the request and the user's flag in the same
      request-scoped transaction, so both land or neither does.
"""

import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lampy.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from lampy.models.user import User
from lampy.models.verification import (
    VERIFICATION_AGE,
    VERIFICATION_APPROVED,
    VERIFICATION_PENDING,
    VERIFICATION_PHOTO,
    VERIFICATION_REJECTED,
    VerificationRequest,
)
from lampy.schemas.auth import VerificationUploadResponse
from lampy.schemas.common import MessageResponse
from lampy.schemas.verification import VerificationResponse
from lampy.services.file_service import (
    PURPOSE_AGE_VERIFICATION,
    PURPOSE_VERIFICATION,
    FileService,
)
from lampy.services.user_service import user_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationKind:
    """How one verification type maps onto storage and the user row."""
    type: str
    purpose: str
    path_field: str
    flag_field: str
    success_message: str


KINDS = {
    VERIFICATION_PHOTO: VerificationKind(
        type=VERIFICATION_PHOTO,
        purpose=PURPOSE_VERIFICATION,
        path_field="verification_photo_url",
        flag_field="photo_verified",
        success_message="Photo uploaded successfully for verification",
    ),
    VERIFICATION_AGE: VerificationKind(
        type=VERIFICATION_AGE,
        purpose=PURPOSE_AGE_VERIFICATION,
        path_field="age_verification_photo_url",
        flag_field="age_verified",
        success_message="ID document uploaded successfully for age verification",
    ),
}


class VerificationService:

    async def submit(
        self,
        db: AsyncSession,
        file_service: FileService,
        user_id: int,
        verification_type: str,
        filename: str | None,
        content: bytes,
    ) -> VerificationUploadResponse:
        """
        Store the artifact, record its path on the user and open a pending request.

        Raises:
            NotFoundError: token user no longer exists
            ValidationError: empty/oversized upload
            FileStorageError / DatabaseError: persistence failures (file is cleaned up)
        """
        kind = KINDS[verification_type]
        user = await user_service.get_user(db, user_id)

        absolute_path, reference = await file_service.store(
            kind.purpose, user_id, filename, content
        )

        request = VerificationRequest(
            user_id=user_id,
            type=kind.type,
            status=VERIFICATION_PENDING,
            image_url=reference,
        )
        db.add(request)
        setattr(user, kind.path_field, reference)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            await file_service.cleanup_file(absolute_path)
            logger.error("Failed to record %s verification for user %s: %s", kind.type, user_id, str(e))
            raise DatabaseError(
                message="Failed to record verification request",
                context={"user_id": user_id, "type": kind.type},
            )

        logger.info("Verification request %s opened (type=%s, user=%s)", request.id, kind.type, user_id)
        return VerificationUploadResponse(message=kind.success_message, status=request.status)

    async def list_requests(self, db: AsyncSession) -> List[VerificationResponse]:
        """Every request, newest first, with the submitting user embedded."""
        try:
            result = await db.execute(
                select(VerificationRequest)
                .options(selectinload(VerificationRequest.user))
                .order_by(VerificationRequest.created_at.desc(), VerificationRequest.id.desc())
            )
            requests = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch verification requests: %s", str(e))
            raise DatabaseError(message="Failed to fetch verification requests")
        return [VerificationResponse.model_validate(r) for r in requests]

    async def _get_request(self, db: AsyncSession, request_id: int) -> VerificationRequest:
        try:
            request = await db.get(VerificationRequest, request_id)
        except SQLAlchemyError as e:
            logger.error("Failed to load verification request %s: %s", request_id, str(e))
            raise DatabaseError(context={"verification_id": request_id})
        if request is None:
            raise NotFoundError(resource="Verification request", resource_id=request_id)
        return request

    @staticmethod
    def _ensure_pending(request: VerificationRequest) -> None:
        if request.status != VERIFICATION_PENDING:
            raise ConflictError(
                message=f"Verification request already {request.status}",
                context={"verification_id": request.id, "status": request.status},
            )

    async def approve(self, db: AsyncSession, request_id: int) -> MessageResponse:
        """
        pending → approved, and set photo_verified / age_verified on the user.

        Both writes are flushed together and committed by the request session.
        """
        request = await self._get_request(db, request_id)
        self._ensure_pending(request)

        user = await db.get(User, request.user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=request.user_id)

        request.status = VERIFICATION_APPROVED
        kind = KINDS.get(request.type)
        if kind is not None:
            setattr(user, kind.flag_field, True)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to approve verification %s: %s", request_id, str(e))
            raise DatabaseError(message="Failed to approve verification")

        logger.info("Verification %s approved (type=%s, user=%s)", request_id, request.type, user.id)
        return MessageResponse(message="Verification approved successfully")

    async def reject(self, db: AsyncSession, request_id: int, reason: str) -> MessageResponse:
        """
        pending → rejected with a mandatory reason. User flags are untouched.

        Raises:
            ValidationError: blank reason
        """
        request = await self._get_request(db, request_id)

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError(message="Rejection reason required", field="reason")

        self._ensure_pending(request)

        request.status = VERIFICATION_REJECTED
        request.reason = reason
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to reject verification %s: %s", request_id, str(e))
            raise DatabaseError(message="Failed to reject verification")

        logger.info("Verification %s rejected", request_id)
        return MessageResponse(message="Verification rejected successfully")


verification_service = VerificationService()
