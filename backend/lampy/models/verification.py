"""
Verification request ORM model (`verification_requests` table).

Created in "pending" by the verify-photo / verify-age uploads and adjudicated
once by an admin: pending → approved | rejected. `reason` is only set on
rejection.

Nothing in the schema stops a user from holding several pending requests;
a fresh upload simply adds another row.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lampy.database import Base, UTCDateTime
from lampy.models.user import User, utcnow

VERIFICATION_PHOTO = "photo"
VERIFICATION_AGE = "age"

VERIFICATION_PENDING = "pending"
VERIFICATION_APPROVED = "approved"
VERIFICATION_REJECTED = "rejected"


class VerificationRequest(Base):
    __tablename__ = "verification_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=VERIFICATION_PENDING)

    # Path reference of the stored upload, e.g. "uploads/verification/verification_3_1700000000_me.jpg"
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)

    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped[User] = relationship(User, lazy="raise")

    __table_args__ = (
        Index("idx_verification_requests_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<VerificationRequest(id={self.id}, user_id={self.user_id}, "
            f"type='{self.type}', status='{self.status}')>"
        )
