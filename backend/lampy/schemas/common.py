"""
Shared response models: errors, plain messages and the liveness probe.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Acknowledgement body for writes that return nothing else."""
    message: str = Field(description="Human-readable result")


class ErrorResponse(BaseModel):
    """
    What:  Body of every error response.

    Fields:
        error: Category for the status class (validation_error, unauthorized,
               not_found, conflict, internal_server_error)
        message: Human-readable description
        request_id: Correlation ID for finding the request in server logs

    Example:
        {
            "error": "conflict",
            "message": "User already exists",
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Error category")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness probe body: overall status plus server time."""
    status: str = Field(description="ok, or degraded when the database is unreachable")
    timestamp: datetime = Field(description="Current server time (UTC)")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
