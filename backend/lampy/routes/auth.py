"""
LAMPY Backend - Auth Routes
===========================

What:  Registration, login and the two verification uploads.

Upload fields:
    POST /auth/verify-photo  multipart field "photo"
    POST /auth/verify-age    multipart field "id_document"

A missing field is reported as a 400 with a field-specific message rather
than FastAPI's generic "field required".
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from lampy.config import Settings
from lampy.database import get_db_session
from lampy.dependencies import get_current_user_id, get_file_service, get_settings, read_upload
from lampy.models.verification import VERIFICATION_AGE, VERIFICATION_PHOTO
from lampy.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    VerificationUploadResponse,
)
from lampy.schemas.common import ErrorResponse
from lampy.services.auth_service import auth_service
from lampy.services.file_service import FileService
from lampy.services.verification_service import verification_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid name, email or password", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    return await auth_service.register(db, settings, payload)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Exchange email and password for a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    return await auth_service.login(db, settings, payload)


@router.post(
    "/verify-photo",
    response_model=VerificationUploadResponse,
    responses={
        400: {"description": "Missing, empty or oversized photo", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
    summary="Submit a photo for identity verification",
)
async def verify_photo(
    photo: Optional[UploadFile] = File(default=None, description="Photo of the user"),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    file_service: FileService = Depends(get_file_service),
) -> VerificationUploadResponse:
    filename, content = await read_upload(photo, "Photo upload required")
    return await verification_service.submit(
        db, file_service, user_id, VERIFICATION_PHOTO, filename, content
    )


@router.post(
    "/verify-age",
    response_model=VerificationUploadResponse,
    responses={
        400: {"description": "Missing, empty or oversized document", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
    summary="Submit an ID document for age verification",
)
async def verify_age(
    id_document: Optional[UploadFile] = File(default=None, description="Scan or photo of an ID document"),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    file_service: FileService = Depends(get_file_service),
) -> VerificationUploadResponse:
    filename, content = await read_upload(id_document, "ID document upload required")
    return await verification_service.submit(
        db, file_service, user_id, VERIFICATION_AGE, filename, content
    )
