"""
Escalation Agent - human handoff

Always opens a high-priority ticket carrying the original request.
"""
from helpdesk_bot.agents.workflow import HELPDESK_PHONE
from helpdesk_bot.models.schemas import Category, EscalationResult, Priority, TicketCreate
from helpdesk_bot.repositories.ticket_repository import TicketRepository
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)


async def escalate_to_human(message: str, store: TicketRepository) -> EscalationResult:
    """
    Escalate a request to a human agent

    Args:
        message: Original user message
        store: Ticket repository

    Returns:
        EscalationResult with the created ticket

    Raises:
        TicketStoreError: Ticket could not be persisted (fatal to the request)
    """
    ticket = await store.create(TicketCreate(
        title=f"Escalation: {message[:40]}...",
        description=f"User requested human assistance.\n\nOriginal request: {message}",
        priority=Priority.HIGH,
        category=Category.OTHER,
    ))
    logger.info(f"Escalated request to human support as ticket #{ticket.id}")

    return EscalationResult(
        ticket_id=ticket.id,
        message=f"""I understand you'd like to speak with a human agent. I've escalated your request.

**Escalation Ticket: #{ticket.id}**

A support specialist will reach out to you shortly. Expected response time:
• Standard issues: Within 2 hours
• Complex issues: Within 24 hours

In the meantime, you can:
• Check ticket status by asking "What's the status of ticket #{ticket.id}?"
• View all your tickets at the Ticket Portal

If this is urgent, call the helpdesk directly at {HELPDESK_PHONE}.""",
        ticket=ticket,
    )
