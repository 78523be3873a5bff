"""
API Response Schemas

Pydantic models for the JSON endpoints (health and service info). The
redirect route answers with redirects and plain text, so it has no schema.
"""

from pydantic import BaseModel, Field


class ServiceInfoResponse(BaseModel):
    """Response model for the root endpoint."""
    message: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    docs: str = Field(..., description="Path of the interactive API docs")


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    status: str
