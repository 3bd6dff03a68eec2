"""
LAMPY Backend - Application Configuration
=========================================

What:  Typed settings loaded from environment variables (or a `.env` file).
How:   pydantic-settings coerces and validates every value when `Settings()`
       is constructed. The application factory receives the instance and
       stores it on `app.state`; request handlers get it through the
       `get_settings` dependency.
Who:   `create_app()`, the auth gate, the file service and Alembic's env.py.

Why no module-level singleton:
    Tests build several apps side by side, each pointing at its own SQLite
    file and upload directory. A global would leak one test's configuration
    into the next.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Placeholder secret; `validate_for_production` complains when it is still in use.
DEFAULT_JWT_SECRET = "change-this-secret-in-production"


class Settings(BaseSettings):
    """
    Application settings, grouped by concern.

    Production deployments must at least override JWT_SECRET and
    DATABASE_URL.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///./lampy.db or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./lampy.db",
        description="Async SQLAlchemy connection URL",
    )

    # Pool sizing only applies to server databases; SQLite ignores it.
    db_pool_size: int = Field(default=20, ge=5, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Create missing tables on startup. Turn off once Alembic owns the schema.
    auto_create_tables: bool = Field(default=True)

    # ── Authentication ────────────────────────────────────────────────────
    jwt_secret: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Shared HMAC secret used to sign bearer tokens",
    )
    jwt_algorithm: str = Field(default="HS256")

    # bcrypt cost factor; tests drop it to 4 to keep hashing fast.
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)

    # ── File Storage ──────────────────────────────────────────────────────
    # Root of the uploads tree (profiles/, verification/, age_verification/)
    upload_root: str = Field(default="./uploads")

    # 10MB default, 50MB ceiling
    max_upload_size: int = Field(default=10_485_760, ge=1024, le=52_428_800)

    # ── HTTP ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api/v1")

    # Comma-separated list; "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits the comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Guarantees a leading slash and no trailing slash ("/api/v1")."""
        v = "/" + v.strip("/")
        return "" if v == "/" else v

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # Per-IP sliding window; 0 requests disables the limiter.
    rate_limit_requests: int = Field(default=300, ge=0, le=100_000)
    rate_limit_window: int = Field(default=60, ge=1, le=86400)  # seconds

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_for_production(self) -> None:
        """
        Checks the settings that are unsafe to leave at their defaults.

        Called from the lifespan handler. Raises ValueError listing every
        problem so the operator sees them all at once.
        """
        errors = []
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET is still the built-in placeholder.")
        elif len(self.jwt_secret) < 32:
            errors.append("JWT_SECRET should be at least 32 characters long.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )
