"""
LAMPY Backend - User Model
==========================

What:  ORM model for the `users` table.
Who:   Auth service (register/login), user service (profile, photos,
       preferences) and the verification service (flag flips on approval).

Lifecycle:
    Created at registration; updated by profile/location/preference edits,
    uploads and verification approval. Rows are never hard-deleted.

Column notes:
    - hashed_password: bcrypt output (bytes). Never serialized.
    - *_photo_url: path references written by the upload handlers, empty
      string until the first upload.
    - consultation_preferences: ordered list of free-form strings stored as
      JSON. Reassign the list to update it; in-place mutation is not tracked.
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, Boolean, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from lampy.database import Base, UTCDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    hashed_password: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    # ── Verification Flags ────────────────────────────────────────────────
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    photo_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    age_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # ── Profile ───────────────────────────────────────────────────────────
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    profile_photo_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    verification_photo_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    age_verification_photo_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")

    consultation_preferences: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
