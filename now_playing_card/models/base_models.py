"""Pydantic models for request/response validation."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str


class PublishResponse(BaseModel):
    """Response to a successful snapshot publish."""

    success: bool = True
