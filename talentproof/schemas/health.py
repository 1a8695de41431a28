"""
Pydantic schemas for health endpoints.
"""
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Schema for the health check."""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: str = Field(..., description="Current UTC time (ISO 8601)")
    active_sessions: int = Field(..., description="Quiz sessions currently held")
    available_quizzes: int = Field(..., description="Number of quiz topics")
