"""
LAMPY Backend - Counselling Session Model
=========================================

What:  A booked session between a user and a counsellor (`sessions` table).
Why the class name: `Session` would shadow SQLAlchemy's session type in every
       service module, so the ORM class is `CounsellingSession`.

Status values:
    pending → cancelled is the only transition the API performs.
    confirmed and completed are valid stored values for operator tooling.
    Cancellation overwrites the status unconditionally (a completed session
    can be cancelled), so cancelling twice is harmless.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lampy.database import Base, UTCDateTime
from lampy.models.counsellor import Counsellor
from lampy.models.user import User, utcnow

SESSION_PENDING = "pending"
SESSION_CONFIRMED = "confirmed"
SESSION_COMPLETED = "completed"
SESSION_CANCELLED = "cancelled"

SESSION_STATUSES = (SESSION_PENDING, SESSION_CONFIRMED, SESSION_COMPLETED, SESSION_CANCELLED)


class CounsellingSession(Base):
    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    counsellor_id: Mapped[int] = mapped_column(ForeignKey("counsellors.id"), nullable=False)

    # Always UTC; parsed from a strict "YYYY-MM-DDTHH:MM:SSZ" string on booking
    session_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Minutes
    duration: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SESSION_PENDING)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped[User] = relationship(User, lazy="raise")
    counsellor: Mapped[Counsellor] = relationship(Counsellor, lazy="raise")

    # "My sessions, newest first"
    __table_args__ = (
        Index("idx_sessions_user_date", "user_id", "session_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<CounsellingSession(id={self.id}, user_id={self.user_id}, "
            f"counsellor_id={self.counsellor_id}, status='{self.status}')>"
        )
