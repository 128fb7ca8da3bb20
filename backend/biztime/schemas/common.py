"""
BizTime Backend — Shared Response Schemas
==========================================

What:  Pydantic models shared by both resources: the delete acknowledgement,
       the error envelope and the health check.
Why:   Every failure, whatever the resource, answers with the same
       `{"error": {"message", "status"}}` body.
"""

from typing import Optional

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """Returned by DELETE /companies/{code} and DELETE /invoices/{id}."""
    status: str = Field(default="deleted", description="Acknowledgement of the operation")


class ErrorBody(BaseModel):
    message: str = Field(description="Human-readable error description")
    status: int = Field(description="HTTP status code, repeated from the status line")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {"error": {"message": "No such invoice: 999", "status": 404}}
    """
    error: ErrorBody


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
    detail: Optional[str] = Field(default=None, description="Failure reason when unhealthy")
