"""
Bookshelf Backend — Shared Response Schemas
=============================================

What:  Response shapes used by more than one route module.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Success acknowledgement for mutations that return no resource."""
    message: str = Field(description="Human-readable success message")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error envelope for every non-2xx answer.
    Why:   Clients branch on `error` (a stable ErrorType code) and show `message`.

    Example:
        {
            "error": "VALIDATION_ERROR",
            "message": "Email is required",
            "details": null,
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code (ErrorType)")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
