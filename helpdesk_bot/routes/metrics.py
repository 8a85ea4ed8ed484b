"""
Metrics and analytics API routes
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from datetime import datetime, timedelta
from typing import List

from helpdesk_bot.models.schemas import MetricEvent, MetricsSummary, utcnow
from helpdesk_bot.routes.dependencies import get_metrics_tracker
from helpdesk_bot.services.metrics import MetricsTracker

router = APIRouter(prefix="/api/metrics", tags=["metrics"])

RECENT_EVENTS_COUNT = 20


class MetricsResponse(BaseModel):
    """Metrics response model"""
    success: bool
    timestamp: datetime
    last_hour: MetricsSummary
    last_24_hours: MetricsSummary
    recent_events: List[MetricEvent]


@router.get("", response_model=MetricsResponse)
async def get_metrics(metrics: MetricsTracker = Depends(get_metrics_tracker)):
    """
    Get pipeline metrics

    Metrics:
    - Request count and average latency
    - Routing accuracy
    - Ticket creation success rate
    - Knowledge retrieval hit rate
    - Error rate
    """
    return MetricsResponse(
        success=True,
        timestamp=utcnow(),
        last_hour=metrics.get_summary(timedelta(hours=1)),
        last_24_hours=metrics.get_summary(timedelta(hours=24)),
        recent_events=metrics.get_recent_events(RECENT_EVENTS_COUNT),
    )
