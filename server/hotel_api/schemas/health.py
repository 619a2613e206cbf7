"""Health check schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response schema."""

    success: bool = Field(True, description="Always true when the service answers")
    message: str = Field(..., description="Service status message")
    timestamp: datetime = Field(..., description="Current server time (ISO 8601)")
    version: str = Field(..., description="API version")
    environment: str = Field(..., description="Deployment environment")
