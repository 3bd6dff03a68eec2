"""
Counsellor ORM model (`counsellors` table).

Read-heavy: listed, filtered by specialty and ranked by rating. Created
through the admin endpoint. `available` gates new bookings.
"""

from datetime import datetime
from typing import List

from sqlalchemy import JSON, Boolean, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lampy.database import Base, UTCDateTime
from lampy.models.user import utcnow


class Counsellor(Base):
    __tablename__ = "counsellors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    experience: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    qualification: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Display string including currency, e.g. "₹1000"
    price: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_ratings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    specialties: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    # Listing and recommendation both read "available ORDER BY rating DESC"
    __table_args__ = (
        Index("idx_counsellors_available_rating", "available", "rating"),
    )

    def __repr__(self) -> str:
        return f"<Counsellor(id={self.id}, name='{self.name}', available={self.available})>"
