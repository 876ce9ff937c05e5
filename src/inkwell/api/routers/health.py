"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter
from pydantic import BaseModel

from inkwell.core.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    success: bool
    message: str
    timestamp: datetime
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report that the server is up."""
    return HealthResponse(
        success=True,
        message="Server is running",
        timestamp=datetime.now(UTC),
        environment=get_settings().environment,
    )
