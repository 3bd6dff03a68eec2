"""
LAMPY Backend - Request Dependencies
====================================

What:  FastAPI dependencies that expose the per-app objects built by
       `create_app()` (settings, file service), the auth gate, and the
       multipart reader shared by the upload routes.

Auth gate:
    `get_current_user_id` reads `Authorization: Bearer <token>`, verifies it
    against the configured secret and returns the user id. Routers attach it
    with `dependencies=[...]` or as a parameter; when it raises, the handler
    never runs.
"""

import logging
from typing import Optional, Tuple

from fastapi import Depends, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lampy.config import Settings
from lampy.exceptions import AuthenticationError, ValidationError
from lampy.security import decode_access_token
from lampy.services.file_service import FileService

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must produce our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> int:
    """
    Validate the bearer token and return the caller's user id.

    The id is also stored on `request.state.user_id` for middleware/logging.

    Raises:
        AuthenticationError (401): missing header, wrong scheme, bad/expired token
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    user_id = decode_access_token(
        credentials.credentials,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    request.state.user_id = user_id
    return user_id


async def read_upload(upload: Optional[UploadFile], missing_message: str) -> Tuple[Optional[str], bytes]:
    """
    Return (filename, content) for an optional multipart field.

    Upload fields are declared with `File(default=None)` so a missing field
    reaches the handler; this turns it into a 400 carrying `missing_message`
    instead of FastAPI's generic "field required".
    """
    if upload is None:
        raise ValidationError(message=missing_message)
    try:
        content = await upload.read()
    finally:
        await upload.close()
    logger.info("Received upload: filename=%s, size=%d bytes", upload.filename or "unknown", len(content))
    return upload.filename, content
