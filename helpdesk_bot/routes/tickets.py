"""
Ticket-related API routes

Direct ticket tools over the configured ticket store, bypassing the
language model.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from helpdesk_bot.config import get_settings
from helpdesk_bot.models.schemas import StatusFilter, Ticket, TicketCreate, TicketStatusUpdate
from helpdesk_bot.repositories.ticket_repository import TicketRepository
from helpdesk_bot.routes.dependencies import get_ticket_store
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/api/tickets", tags=["tickets"])


@router.get("", response_model=List[Ticket])
async def list_tickets(
    status_filter: StatusFilter = Query("all", alias="status"),
    limit: Optional[int] = Query(None, ge=1),
    store: TicketRepository = Depends(get_ticket_store)
):
    """
    List tickets, newest first

    `limit` defaults to the direct-tool list limit.
    """
    return await store.list(status_filter, limit or settings.direct_list_limit)


@router.post("", response_model=Ticket, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    params: TicketCreate,
    store: TicketRepository = Depends(get_ticket_store)
):
    """Create a ticket; status starts as open"""
    ticket = await store.create(params)
    logger.info(f"Created ticket #{ticket.id} via API")
    return ticket


@router.get("/{ticket_id}", response_model=Ticket)
async def get_ticket(
    ticket_id: int,
    store: TicketRepository = Depends(get_ticket_store)
):
    """Get ticket details"""
    ticket = await store.get(ticket_id)
    if ticket is None:
        raise HTTPException(status_code=404, detail=f"Ticket #{ticket_id} not found")
    return ticket


@router.patch("/{ticket_id}/status", response_model=Ticket)
async def update_ticket_status(
    ticket_id: int,
    update: TicketStatusUpdate,
    store: TicketRepository = Depends(get_ticket_store)
):
    """Change a ticket's status (any transition allowed)"""
    ticket = await store.update_status(ticket_id, update.status)
    if ticket is None:
        raise HTTPException(status_code=404, detail=f"Ticket #{ticket_id} not found")
    return ticket
