"""
Request-scoped accessors for the components created in the app lifespan
"""
from fastapi import HTTPException, Request

from helpdesk_bot.repositories.ticket_repository import TicketRepository
from helpdesk_bot.services.metrics import MetricsTracker
from helpdesk_bot.services.orchestrator import OrchestratorService


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise HTTPException(
            status_code=503,
            detail=f"{name} not initialized"
        )
    return component


async def get_orchestrator(request: Request) -> OrchestratorService:
    """Get the orchestrator from app state."""
    return _from_state(request, "orchestrator")


async def get_ticket_store(request: Request) -> TicketRepository:
    """Get the ticket store from app state."""
    return _from_state(request, "ticket_store")


async def get_metrics_tracker(request: Request) -> MetricsTracker:
    """Get the metrics tracker from app state."""
    return _from_state(request, "metrics")
