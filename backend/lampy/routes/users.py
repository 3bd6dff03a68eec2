"""
User profile routes. Every endpoint acts on the token's user.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from lampy.database import get_db_session
from lampy.dependencies import get_current_user_id, get_file_service, read_upload
from lampy.schemas.common import ErrorResponse, MessageResponse
from lampy.schemas.user import (
    LocationRequest,
    PhotoUploadResponse,
    PreferencesRequest,
    ProfileUpdateRequest,
    UserResponse,
)
from lampy.services.file_service import FileService
from lampy.services.user_service import user_service

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.get(
    "/profile",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_profile(db, user_id)


@router.put(
    "/profile",
    response_model=MessageResponse,
    responses={400: {"description": "Empty body, null value or non-updatable field", "model": ErrorResponse}},
    summary="Update name, location and/or consultation preferences",
)
async def update_profile(
    payload: ProfileUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await user_service.update_profile(db, user_id, payload)


@router.post("/location", response_model=MessageResponse)
async def update_location(
    payload: LocationRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await user_service.update_location(db, user_id, payload.location)


@router.post("/preferences", response_model=MessageResponse)
async def update_preferences(
    payload: PreferencesRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await user_service.update_preferences(db, user_id, payload.preferences)


@router.post(
    "/upload-photo",
    response_model=PhotoUploadResponse,
    responses={400: {"description": "Missing, empty or oversized photo", "model": ErrorResponse}},
    summary="Upload a profile photo",
)
async def upload_photo(
    photo: Optional[UploadFile] = File(default=None),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    file_service: FileService = Depends(get_file_service),
) -> PhotoUploadResponse:
    filename, content = await read_upload(photo, "Photo upload required")
    return await user_service.upload_profile_photo(db, file_service, user_id, filename, content)
