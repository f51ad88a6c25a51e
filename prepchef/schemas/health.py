"""
Health check endpoint schema.

GET /health is public and only reports that the process is serving requests;
backend reachability is reported by GET /health/diagnostics.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for GET /health."""

    status: str = Field(
        default="ok",
        description="Always 'ok' if the process is responding",
        examples=["ok"]
    )
    service: str = Field(
        default="prepchef-data",
        description="Name of the responding service",
        examples=["prepchef-data"]
    )

    class Config:
        json_schema_extra = {
            "example": {
                "status": "ok",
                "service": "prepchef-data"
            }
        }
