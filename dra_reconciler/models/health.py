"""Health check data models."""

from datetime import datetime, timezone
from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Health status response for the handler server."""

    status: str = Field(
        ...,
        description="Overall health status: 'healthy' or 'degraded'",
        examples=["healthy"]
    )
    version: str = Field(
        ...,
        description="Version of the reconciler",
        examples=["0.1.0"]
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when health check was performed"
    )
    aws_region: str = Field(
        ...,
        description="Region the FSx client talks to"
    )
    fsx_client_ready: bool = Field(
        ...,
        description="Whether the FSx client has been initialized"
    )
