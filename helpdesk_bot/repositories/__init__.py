"""
Repositories package for database operations

Provides repository classes for CRUD operations on:
- tickets table (SupabaseTicketRepository, InMemoryTicketRepository)
"""
from helpdesk_bot.repositories.ticket_repository import (
    TicketRepository,
    TicketStoreError,
    InMemoryTicketRepository,
    SupabaseTicketRepository,
    create_ticket_repository,
)

__all__ = [
    "TicketRepository",
    "TicketStoreError",
    "InMemoryTicketRepository",
    "SupabaseTicketRepository",
    "create_ticket_repository",
]
