"""
Health check endpoint

- GET /api/health - Basic liveness check
"""
import time
from datetime import datetime
from fastapi import APIRouter, Request, status
from pydantic import BaseModel, Field

from helpdesk_bot.config import get_settings
from helpdesk_bot.models.schemas import utcnow

settings = get_settings()

router = APIRouter(prefix="/api/health", tags=["health"])

# Application start time for uptime calculation
APP_START_TIME = time.time()

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Basic health check response"""
    status: str = Field(..., description="Overall status")
    timestamp: datetime = Field(default_factory=utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    llm_provider: str = Field(..., description="Configured language model provider")
    ticket_store: str = Field(..., description="Configured ticket store backend")


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic application health status and uptime"
)
async def basic_health_check(request: Request) -> HealthResponse:
    """
    Basic health check endpoint

    Does not check external dependencies. Reports "starting" until the
    lifespan has wired the orchestrator.
    """
    ready = getattr(request.app.state, "orchestrator", None) is not None

    return HealthResponse(
        status="healthy" if ready else "starting",
        version=VERSION,
        uptime_seconds=round(time.time() - APP_START_TIME, 2),
        llm_provider=settings.llm_provider,
        ticket_store=settings.ticket_store,
    )
