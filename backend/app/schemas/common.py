"""
Letter Writer Backend — Shared Schemas
========================================

What:  Base model configuration, error body, and health response.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API models: camelCase aliases on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(CamelModel):
    """
    Standardized error body returned by every global exception handler.

    Fields:
        error:        Machine-readable code (e.g. "not_found", "expired_token")
        message:      Human-readable description for the UI banner
        details:      Optional extra context (validation errors, dev-mode detail)
        redirect_url: Where to send the user to reconnect Google (credential errors)
        request_id:   Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "expired_token",
            "message": "Your Google authorization has expired. ...",
            "redirectUrl": "http://localhost:3001/api/auth/google",
            "request_id": "1f0c9a2b"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    redirect_url: Optional[str] = Field(default=None, description="Re-authentication URL")
    request_id: Optional[str] = Field(
        default=None,
        alias="request_id",
        description="Request correlation ID",
    )


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """
    Liveness response. `status` is "ok" while the process serves requests;
    a failed database probe is reported in `database`, not as a failed probe.
    """

    status: str = Field(description="ok or degraded")
    message: str = Field(description="Human-readable status line")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
