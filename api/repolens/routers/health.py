"""Health check endpoint."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

router = APIRouter()

HEALTH_VERSION = "1.0.0"
SERVICE_NAME = "repo-activity-lens"


def _iso_utc(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class HealthResponse(BaseModel):
    """GET /api/health response."""

    model_config = ConfigDict(extra="forbid")
    status: Annotated[str, Field(description="Always 'ok'")]
    service: Annotated[str, Field(description="Service name")]
    version: Annotated[str, Field(description="Semver MAJOR.MINOR.PATCH")]
    timestamp: Annotated[str, Field(description="ISO8601 UTC")]


@router.get("/health", response_model=HealthResponse)
async def health():
    """Return API health status."""
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        version=HEALTH_VERSION,
        timestamp=_iso_utc(datetime.now(timezone.utc)),
    )
