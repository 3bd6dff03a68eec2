"""
LAMPY Backend - User Schemas
============================

What:  API contracts for user records and the profile/preference endpoints.
Why separate from the ORM model: the hashed password must never be
       serialized, and profile updates only accept an explicit allow-list.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class UserResponse(BaseModel):
    """Public representation of a user; every field except the password hash."""
    id: int
    name: str
    email: str
    is_verified: bool
    photo_verified: bool
    age_verified: bool
    location: str
    profile_photo_url: str
    verification_photo_url: str
    age_verification_photo_url: str
    consultation_preferences: List[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdateRequest(BaseModel):
    """
    What:  Partial profile update for PUT /users/profile.

    Allow-list:
        Only these three fields are writable here. Email, verification flags
        and photo paths each have their own workflow, so unknown keys are a
        validation error (extra="forbid") instead of being silently written.

    Fields are optional but not nullable: leaving one out keeps the stored
    value, while an explicit null is rejected with a message naming the field.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    consultation_preferences: Optional[List[str]] = None

    model_config = {"extra": "forbid"}

    @field_validator("name", "location", "consultation_preferences", mode="before")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def changes(self) -> dict:
        """Fields the client actually sent, ready to apply to the row."""
        return self.model_dump(exclude_unset=True)


class LocationRequest(BaseModel):
    location: str = Field(min_length=1, max_length=255)

    @field_validator("location")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("location must not be blank")
        return v


class PreferencesRequest(BaseModel):
    """Free-form preference list; values are not checked against a known set."""
    preferences: List[str]


class PhotoUploadResponse(BaseModel):
    """
    upload_url: stored path reference (also saved on the user row)
    image_url:  public URL the file is served from
    """
    upload_url: str
    image_url: str
