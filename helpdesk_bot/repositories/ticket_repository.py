"""
Ticket Repository

Owns persistence of the `tickets` entity. Two implementations share one
async contract:
- InMemoryTicketRepository: process-local store (default, tests, local dev)
- SupabaseTicketRepository: `tickets` table in Supabase

Callers always receive copies of tickets, never references into storage.
"""
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from helpdesk_bot.config import Settings, get_settings
from helpdesk_bot.models.schemas import (
    Ticket,
    TicketCreate,
    TicketStatus,
    utcnow,
)
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


class TicketStoreError(Exception):
    """Persistence is unavailable or rejected the operation"""


class TicketRepository(ABC):
    """Async contract for ticket persistence"""

    @abstractmethod
    async def create(self, params: TicketCreate) -> Ticket:
        """Create a ticket with status `open` and a fresh id"""

    @abstractmethod
    async def get(self, ticket_id: int) -> Optional[Ticket]:
        """Return the ticket or None if it does not exist"""

    @abstractmethod
    async def list(self, status_filter: str = "all", limit: int = 10) -> List[Ticket]:
        """Return tickets newest first, optionally filtered by status"""

    @abstractmethod
    async def update_status(
        self,
        ticket_id: int,
        status: Union[TicketStatus, str]
    ) -> Optional[Ticket]:
        """Set a ticket's status; None if it does not exist"""


class InMemoryTicketRepository(TicketRepository):
    """Process-local ticket store with monotonically increasing ids"""

    def __init__(self) -> None:
        self._tickets: Dict[int, Ticket] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def create(self, params: TicketCreate) -> Ticket:
        async with self._lock:
            now = utcnow()
            ticket = Ticket(
                id=self._next_id,
                title=params.title,
                description=params.description,
                status=TicketStatus.OPEN,
                priority=params.priority,
                category=params.category,
                created_at=now,
                updated_at=now,
            )
            self._tickets[ticket.id] = ticket
            self._next_id += 1

        logger.info(f"Created ticket #{ticket.id} ({ticket.priority.value}/{ticket.category.value})")
        return ticket.model_copy()

    async def get(self, ticket_id: int) -> Optional[Ticket]:
        ticket = self._tickets.get(ticket_id)
        return ticket.model_copy() if ticket else None

    async def list(self, status_filter: str = "all", limit: int = 10) -> List[Ticket]:
        tickets = [
            t for t in self._tickets.values()
            if status_filter == "all" or t.status == status_filter
        ]
        tickets.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return [t.model_copy() for t in tickets[:limit]]

    async def update_status(
        self,
        ticket_id: int,
        status: Union[TicketStatus, str]
    ) -> Optional[Ticket]:
        async with self._lock:
            ticket = self._tickets.get(ticket_id)
            if ticket is None:
                return None

            # updated_at never precedes created_at
            updated = ticket.model_copy(update={
                "status": TicketStatus(status),
                "updated_at": max(utcnow(), ticket.created_at),
            })
            self._tickets[ticket_id] = updated

        logger.info(f"Updated ticket #{ticket_id} status to {updated.status.value}")
        return updated.model_copy()


class SupabaseTicketRepository(TicketRepository):
    """Repository for the Supabase `tickets` table"""

    def __init__(self, supabase_client=None) -> None:
        if supabase_client is None:
            from supabase import create_client  # Lazy import for tests

            self.client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key or settings.supabase_key
            )
        else:
            self.client = supabase_client

        self.table_name = "tickets"
        logger.info("SupabaseTicketRepository initialized for table: %s", self.table_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _deserialize(row: Dict[str, Any]) -> Ticket:
        """Convert Supabase row into Ticket model."""
        row = dict(row)
        if row.get("description") is None:
            row["description"] = ""
        return Ticket(**row)

    async def _execute(self, query, operation: str):
        """Run a query builder off the event loop, wrapping client errors."""
        try:
            return await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.error(f"Repository error during {operation}: {e}")
            raise TicketStoreError(f"Failed to {operation}: {e}") from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    async def create(self, params: TicketCreate) -> Ticket:
        payload = {
            "title": params.title,
            "description": params.description,
            "status": TicketStatus.OPEN.value,
            "priority": params.priority.value,
            "category": params.category.value,
        }
        response = await self._execute(
            self.client.table(self.table_name).insert(payload),
            "create ticket"
        )
        if not response.data:
            raise TicketStoreError("Failed to create ticket: no row returned")

        ticket = self._deserialize(response.data[0])
        logger.info(f"Created ticket #{ticket.id} ({ticket.priority.value}/{ticket.category.value})")
        return ticket

    async def get(self, ticket_id: int) -> Optional[Ticket]:
        response = await self._execute(
            self.client.table(self.table_name)
            .select("*")
            .eq("id", ticket_id)
            .limit(1),
            f"get ticket {ticket_id}"
        )
        if not response.data:
            return None
        return self._deserialize(response.data[0])

    async def list(self, status_filter: str = "all", limit: int = 10) -> List[Ticket]:
        query = self.client.table(self.table_name).select("*")
        if status_filter != "all":
            query = query.eq("status", status_filter)

        response = await self._execute(
            query.order("created_at", desc=True).limit(limit),
            "list tickets"
        )
        return [self._deserialize(row) for row in response.data or []]

    async def update_status(
        self,
        ticket_id: int,
        status: Union[TicketStatus, str]
    ) -> Optional[Ticket]:
        payload = {
            "status": TicketStatus(status).value,
            "updated_at": utcnow().isoformat(),
        }
        response = await self._execute(
            self.client.table(self.table_name)
            .update(payload)
            .eq("id", ticket_id),
            f"update ticket {ticket_id}"
        )
        if not response.data:
            return None

        ticket = self._deserialize(response.data[0])
        logger.info(f"Updated ticket #{ticket_id} status to {ticket.status.value}")
        return ticket


def create_ticket_repository(config: Optional[Settings] = None) -> TicketRepository:
    """
    Build the configured ticket repository

    Args:
        config: Settings (default: cached settings)

    Returns:
        SupabaseTicketRepository when `ticket_store == "supabase"`,
        otherwise InMemoryTicketRepository
    """
    config = config or settings
    if config.ticket_store == "supabase":
        return SupabaseTicketRepository()
    return InMemoryTicketRepository()
