"""Create users, counsellors, sessions and verification_requests

Revision ID: 001
Revises: None
Create Date: 2025-01-10 00:00:00.000000+00:00

Rollback: downgrade() drops all four tables (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.LargeBinary(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("photo_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("age_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("location", sa.String(255), nullable=False, server_default=""),
        sa.Column("profile_photo_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("verification_photo_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("age_verification_photo_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("consultation_preferences", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "counsellors",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(255), nullable=False),
        sa.Column("experience", sa.String(100), nullable=False, server_default=""),
        sa.Column("qualification", sa.String(255), nullable=False, server_default=""),
        sa.Column("price", sa.String(50), nullable=False, server_default=""),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_ratings", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("image_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("specialties", sa.JSON(), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_counsellors_available_rating", "counsellors", ["available", "rating"]
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("counsellor_id", sa.Integer(), sa.ForeignKey("counsellors.id"), nullable=False),
        sa.Column("session_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_sessions_user_date", "sessions", ["user_id", "session_date"])

    op.create_table(
        "verification_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("image_url", sa.String(512), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_verification_requests_created_at", "verification_requests", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index("idx_verification_requests_created_at", table_name="verification_requests")
    op.drop_table("verification_requests")
    op.drop_index("idx_sessions_user_date", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("idx_counsellors_available_rating", table_name="counsellors")
    op.drop_table("counsellors")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
