"""
Verification request schemas for the admin review queue.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from lampy.schemas.user import UserResponse


class VerificationResponse(BaseModel):
    id: int
    user_id: int
    type: str
    status: str
    image_url: str
    reason: Optional[str] = None
    user: UserResponse
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RejectionRequest(BaseModel):
    """Blank reasons are rejected by the service, not here, so the message is specific."""
    reason: str = ""
