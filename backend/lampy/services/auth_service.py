"""
LAMPY Backend - Auth Service
============================

What:  Registration and login.
How:   Looks users up by email, hashes/verifies passwords with bcrypt in a
       worker thread, and issues 24h bearer tokens.

Enumeration resistance:
    Login answers "Invalid credentials" (401) both when the email is unknown
    and when the password is wrong, with an identical body.

Email handling:
    Addresses are stored and compared lower-cased, so "Ann@Example.com" and
    "ann@example.com" are the same account.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from lampy.config import Settings
from lampy.exceptions import AuthenticationError, ConflictError, DatabaseError
from lampy.models.user import User
from lampy.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from lampy.schemas.user import UserResponse
from lampy.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Stateless; settings and the session are passed per call."""

    async def find_by_email(self, db: AsyncSession, email: str) -> User | None:
        try:
            result = await db.execute(select(User).where(User.email == normalize_email(email)))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(context={"operation": "find_by_email"})

    def _issue(self, user: User, settings: Settings) -> AuthResponse:
        token = create_access_token(
            user.id,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        return AuthResponse(token=token, user=UserResponse.model_validate(user))

    async def register(
        self,
        db: AsyncSession,
        settings: Settings,
        payload: RegisterRequest,
    ) -> AuthResponse:
        """
        Create a user and return a token for it.

        Raises:
            ConflictError (409): email already registered. The existing row is
                                 untouched.
            DatabaseError (500): insert failed for any other reason
        """
        email = normalize_email(payload.email)

        if await self.find_by_email(db, email) is not None:
            raise ConflictError(message="User already exists", context={"email": email})

        hashed = await run_in_threadpool(hash_password, payload.password, settings.bcrypt_rounds)

        user = User(name=payload.name.strip(), email=email, hashed_password=hashed)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError(message="User already exists", context={"email": email})
        except SQLAlchemyError as e:
            logger.error("Failed to create user: %s", str(e))
            raise DatabaseError(message="Failed to create user", context={"email": email})

        logger.info("User registered: id=%s", user.id)
        return self._issue(user, settings)

    async def login(
        self,
        db: AsyncSession,
        settings: Settings,
        payload: LoginRequest,
    ) -> AuthResponse:
        """
        Verify credentials and return a fresh token.

        Raises:
            AuthenticationError (401): unknown email or wrong password (same message)
        """
        user = await self.find_by_email(db, payload.email)
        if user is None:
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        valid = await run_in_threadpool(verify_password, payload.password, user.hashed_password)
        if not valid:
            logger.info("Failed login for user id=%s", user.id)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        return self._issue(user, settings)


auth_service = AuthService()
