"""
LAMPY Backend - User Service
============================

What:  Profile read/update, location, consultation preferences and the
       profile photo upload for the authenticated user.

Update semantics:
    Plain last-write-wins field assignments on the caller's own row. No
    optimistic locking; preference values are not validated against a
    catalogue.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lampy.exceptions import DatabaseError, NotFoundError, ValidationError
from lampy.models.user import User
from lampy.schemas.common import MessageResponse
from lampy.schemas.user import PhotoUploadResponse, ProfileUpdateRequest, UserResponse
from lampy.services.file_service import PURPOSE_PROFILES, FileService

logger = logging.getLogger(__name__)


class UserService:

    async def get_user(self, db: AsyncSession, user_id: int) -> User:
        """
        Load a user row by id.

        Raises:
            NotFoundError: the token refers to a user that does not exist
        """
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})
        if user is None:
            raise NotFoundError(resource="User", resource_id=user_id)
        return user

    async def get_profile(self, db: AsyncSession, user_id: int) -> UserResponse:
        return UserResponse.model_validate(await self.get_user(db, user_id))

    async def _save(self, db: AsyncSession, user: User, what: str) -> None:
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to update %s for user %s: %s", what, user.id, str(e))
            raise DatabaseError(message=f"Failed to update {what}", context={"user_id": user.id})

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: int,
        payload: ProfileUpdateRequest,
    ) -> MessageResponse:
        """
        Apply the allow-listed fields present in `payload`.

        Raises:
            ValidationError: the body contained no updatable field
        """
        changes = payload.changes()
        if not changes:
            raise ValidationError(message="No updatable fields supplied")

        user = await self.get_user(db, user_id)
        for field, value in changes.items():
            setattr(user, field, list(value) if field == "consultation_preferences" else value)
        await self._save(db, user, "profile")

        logger.info("Profile updated for user %s: %s", user_id, sorted(changes))
        return MessageResponse(message="Profile updated successfully")

    async def update_location(self, db: AsyncSession, user_id: int, location: str) -> MessageResponse:
        user = await self.get_user(db, user_id)
        user.location = location
        await self._save(db, user, "location")
        return MessageResponse(message="Location updated successfully")

    async def update_preferences(
        self,
        db: AsyncSession,
        user_id: int,
        preferences: list[str],
    ) -> MessageResponse:
        user = await self.get_user(db, user_id)
        # New list object so the JSON column registers the change
        user.consultation_preferences = list(preferences)
        await self._save(db, user, "preferences")
        return MessageResponse(message="Consultation preferences updated successfully")

    async def upload_profile_photo(
        self,
        db: AsyncSession,
        file_service: FileService,
        user_id: int,
        filename: str | None,
        content: bytes,
    ) -> PhotoUploadResponse:
        """
        Store a new profile photo and point `profile_photo_url` at it.

        The file is removed again if the row update fails.
        """
        user = await self.get_user(db, user_id)
        absolute_path, reference = await file_service.store(
            PURPOSE_PROFILES, user_id, filename, content
        )

        user.profile_photo_url = reference
        try:
            await db.flush()
        except SQLAlchemyError as e:
            await file_service.cleanup_file(absolute_path)
            logger.error("Failed to update profile photo for user %s: %s", user_id, str(e))
            raise DatabaseError(message="Failed to update profile photo", context={"user_id": user_id})

        return PhotoUploadResponse(upload_url=reference, image_url=file_service.public_url(reference))


user_service = UserService()
