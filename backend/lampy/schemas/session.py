"""
Session booking schemas.

`session_date` arrives as a string on purpose: the service parses it with a
strict UTC format and reports its own 400, instead of letting Pydantic accept
every ISO-8601 variant (offsets, dates without time, ...).
"""

from datetime import datetime

from pydantic import BaseModel, Field

from lampy.schemas.counsellor import CounsellorResponse


class SessionBookingRequest(BaseModel):
    counsellor_id: int = Field(gt=0)
    session_date: str = Field(description="UTC timestamp, e.g. 2025-03-01T10:00:00Z")
    duration: int = Field(gt=0, le=24 * 60, description="Length in minutes")
    notes: str = Field(default="", max_length=2000)


class SessionResponse(BaseModel):
    id: int
    user_id: int
    counsellor_id: int
    session_date: datetime
    duration: int
    status: str
    notes: str
    counsellor: CounsellorResponse
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
