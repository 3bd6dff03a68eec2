"""
Counsellor schemas for listing, detail and admin creation.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class CounsellorResponse(BaseModel):
    id: int
    name: str
    role: str
    experience: str
    qualification: str
    price: str
    rating: float
    total_ratings: int
    image_url: str
    specialties: List[str]
    available: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CounsellorCreate(BaseModel):
    """
    What:  Body for POST /admin/counsellors.
    Who:   Operators populating the directory (the route is unauthenticated).
    """
    name: str = Field(min_length=1, max_length=255)
    role: str = Field(min_length=1, max_length=255)
    experience: str = Field(default="", max_length=100)
    qualification: str = Field(default="", max_length=255)
    price: str = Field(default="", max_length=50)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    total_ratings: int = Field(default=0, ge=0)
    image_url: str = Field(default="", max_length=512)
    specialties: List[str] = Field(default_factory=list)
    available: bool = True
