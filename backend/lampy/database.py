"""
LAMPY Backend - Database Session Management
===========================================

What:  Async SQLAlchemy engine and session factory wrapped in a `Database`
       handle, plus the FastAPI dependency that hands out one session per
       request.
How:   `create_app()` builds a `Database` from the settings and stores it on
       `app.state.database`. `get_db_session` opens a session from it, commits
       when the handler returns and rolls back if anything raises.

Transaction model:
    One request == one transaction. Handlers that touch several rows (for
    example approving a verification request and flipping the user's flag)
    only `flush()`; the commit in `get_db_session` makes the whole request
    land or fail together.
"""

import logging
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import DateTime, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from lampy.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models (shared metadata for Alembic and create_all)."""
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp column.

    SQLite has no timezone storage and hands back naive values; PostgreSQL
    returns aware ones in the connection's zone. Both are normalised to UTC
    on the way in and out, so API responses always carry the "Z" suffix.
    Naive values written by callers are taken to already be UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    @staticmethod
    def as_utc(value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return self.as_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return self.as_utc(value)


class Database:
    """
    Owns the engine and session factory for one application instance.

    Pool arguments are only passed for server databases; SQLite's
    aiosqlite pools reject `pool_size`/`max_overflow`.
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        # expire_on_commit=False: response models read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Creates any missing tables from the ORM metadata."""
        # Models must be imported so their tables are registered on Base.metadata
        import lampy.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        """Runs SELECT 1; returns False instead of raising when the DB is down."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Closes every pooled connection (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing a request-scoped session.

    Commits after the handler returns; rolls back and re-raises on error so
    the global exception handlers can format the response.

    Example:
        @router.get("/profile")
        async def get_profile(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
