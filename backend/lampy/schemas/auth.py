"""
Auth request/response schemas: register, login and upload acknowledgements.
"""

from pydantic import BaseModel, EmailStr, Field

from lampy.schemas.user import UserResponse

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=72)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthResponse(BaseModel):
    """Returned by register (201) and login (200)."""
    token: str = Field(description="Bearer token, valid for 24 hours")
    user: UserResponse


class VerificationUploadResponse(BaseModel):
    message: str
    status: str = Field(description="Status of the created verification request (pending)")
