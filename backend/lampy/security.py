"""
LAMPY Backend - Tokens and Password Hashing
===========================================

What:  Bearer token issue/verify (HS256 JWT via python-jose) and password
       hashing (bcrypt).
Who:   Auth service (register/login) and the `get_current_user_id`
       dependency that guards protected routes.

Token contract:
    Payload = {"user_id": <int>, "iat": <issued>, "exp": <issued + 24h>}
    Lifetime is fixed at 24 hours. Every verification failure (bad
    signature, expired, malformed, missing claim) raises the same
    AuthenticationError so callers cannot tell the causes apart.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from lampy.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(hours=24)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


# ══════════════════════════════════════════════════════════════════════════
# Bearer Tokens
# ══════════════════════════════════════════════════════════════════════════

def create_access_token(
    user_id: int,
    secret: str,
    algorithm: str = "HS256",
    issued_at: Optional[datetime] = None,
) -> str:
    """
    Issue a signed token for `user_id`.

    Args:
        issued_at: Override the issue time. Only tests pass this, to mint
                   tokens that are already expired.
    """
    iat = issued_at or datetime.now(timezone.utc)
    claims = {
        "user_id": user_id,
        "iat": iat,
        "exp": iat + TOKEN_LIFETIME,
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> int:
    """
    Verify signature and expiry and return the embedded user id.

    Raises:
        AuthenticationError: for any invalid token
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as e:
        logger.debug("Rejected bearer token: %s", str(e))
        raise AuthenticationError()

    user_id = payload.get("user_id")
    # bool is an int subclass; a token carrying `true` is not a user id
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        raise AuthenticationError()
    return user_id


# ══════════════════════════════════════════════════════════════════════════
# Passwords
# ══════════════════════════════════════════════════════════════════════════

def hash_password(password: str, rounds: int = 12) -> bytes:
    """
    Hash a password with bcrypt (salted, cost factor `rounds`).

    CPU-bound; async callers run it through `run_in_threadpool`.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(
            message=f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes",
            field="password",
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds))


def verify_password(password: str, hashed: bytes) -> bool:
    """Constant-time comparison of `password` against a stored bcrypt hash."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed)
    except ValueError:
        # Corrupt or foreign hash in the row
        logger.warning("Stored password hash could not be parsed")
        return False
