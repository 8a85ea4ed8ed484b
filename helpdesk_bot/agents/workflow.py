"""
Workflow Agent - action extraction and dispatch

Turns a free-text request into one of a fixed set of ticket operations:

1. extract_action: the language model picks an action and its parameters
   (validated against the ActionDecision union). On failure a coarse
   keyword fallback decides instead.
2. execute_action: runs the action against the ticket store and builds the
   user-facing WorkflowResult.

Missing parameters and unknown ticket ids are reported as
`success=False` results, never as exceptions.
"""
from typing import Optional, Tuple

from helpdesk_bot.config import get_settings
from helpdesk_bot.models.schemas import (
    ActionDecision,
    AnalyzeLogsAction,
    CheckStatusAction,
    CreateTicketAction,
    ListTicketsAction,
    PasswordResetAction,
    Priority,
    Category,
    Ticket,
    TicketCreate,
    TicketStatus,
    UnknownAction,
    UpdateStatusAction,
    WorkflowResult,
)
from helpdesk_bot.repositories.ticket_repository import TicketRepository
from helpdesk_bot.services.diagnostics import analyze_system_logs
from helpdesk_bot.services.llm_service import LLMService, LLMSuccess
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

HELPDESK_PHONE = "555-0199"

FALLBACK_TICKET_KEYWORDS = ("ticket", "broken", "issue", "fix")
FALLBACK_PASSWORD_KEYWORDS = ("password", "reset")

# Checked in order; the first matching group wins
STATUS_KEYWORDS = (
    (TicketStatus.CLOSED, ("close", "shut", "done", "complete", "finish")),
    (TicketStatus.RESOLVED, ("resolve", "fix")),
    (TicketStatus.IN_PROGRESS, ("progress", "start", "work", "begin")),
    (TicketStatus.OPEN, ("reopen", "re-open")),
)

PASSWORD_RESET_MESSAGE = f"""I've initiated the password reset process. Here's what to do next:

1. Check your backup email for a verification code
2. Visit https://password.example.com
3. Enter your username and the verification code
4. Create a new password (12+ characters, mix of letters, numbers, symbols)

If you don't receive the email within 5 minutes, contact the helpdesk at {HELPDESK_PHONE}."""

UNKNOWN_ACTION_MESSAGE = (
    "I'm not sure how to handle that workflow request. Could you please rephrase or try one of these:\n"
    "• Create a ticket for an issue\n"
    "• Check ticket status\n"
    "• Reset your password\n"
    "• Analyze system logs"
)

ACTION_PROMPT = """You are an IT Workflow Automation Agent. Analyze the user's request and determine the appropriate action.

Available Actions:
1. create_ticket - Create a new IT support ticket for hardware issues, software problems, access requests, etc.
2. check_status - Check the status of an existing ticket (requires ticket ID)
3. list_tickets - List recent tickets, optionally filtered by status
4. update_status - Update a ticket's status (mark as resolved, closed, in_progress, or reopen)
5. password_reset - Initiate a password reset
6. analyze_logs - Analyze system logs for diagnostics (vpn, email, network, authentication)
7. unknown - If the request doesn't match any action

For create_ticket, extract:
- title: A SHORT title (3-6 words max). Examples: "Broken Monitor", "VPN Connection Issue", "Password Reset Request", "Laptop Not Booting". DO NOT include explanatory text or prompts - just a simple title.
- description: The full problem description from the user
- priority: low/medium/high/critical (based on urgency)
- category: hardware/software/network/access/other

For check_status, extract:
- ticket_id: The numeric ticket ID mentioned

For list_tickets, extract:
- status_filter: open/in_progress/resolved/closed/all

For update_status, extract:
- ticket_id: The numeric ticket ID to update
- new_status: Map the user's intent to one of these values:
  * "closed" - if user says: close, closed, mark closed, shut, complete, done, finished
  * "resolved" - if user says: resolve, resolved, fix, fixed, mark resolved, mark as resolved
  * "in_progress" - if user says: in progress, working on, start, started, begin
  * "open" - if user says: reopen, open, re-open
  IMPORTANT: Always extract new_status when the user's intent is clear. "close ticket 10" means new_status="closed".

For analyze_logs, extract:
- system: vpn/email/network/authentication

Set "action" to the chosen action, include only that action's parameters, and add a brief "reasoning".

User Request: "{message}"
"""


# ============================================================================
# Extraction
# ============================================================================

def infer_status_from_keywords(message: str) -> Optional[TicketStatus]:
    """Map status verbs in the raw message to a canonical status"""
    lower_msg = message.lower()
    for status, keywords in STATUS_KEYWORDS:
        if any(kw in lower_msg for kw in keywords):
            return status
    return None


def fallback_action(message: str) -> ActionDecision:
    """
    Coarse keyword fallback used when extraction or dispatch fails

    Much lower fidelity than the model: only ticket creation and password
    reset can be recognized.
    """
    lower_msg = message.lower()
    if any(kw in lower_msg for kw in FALLBACK_TICKET_KEYWORDS):
        return CreateTicketAction(
            title=message[:50],
            description=message,
            priority=Priority.MEDIUM,
            category=Category.OTHER,
            reasoning="keyword fallback",
        )
    if any(kw in lower_msg for kw in FALLBACK_PASSWORD_KEYWORDS):
        return PasswordResetAction(reasoning="keyword fallback")
    return UnknownAction(reasoning="keyword fallback")


async def _extract(message: str, llm: LLMService) -> Tuple[ActionDecision, bool]:
    """Returns (decision, came_from_model)"""
    result = await llm.generate_structured(
        ACTION_PROMPT.format(message=message),
        ActionDecision
    )

    if isinstance(result, LLMSuccess):
        decision = result.value
        logger.info(f"Extracted action {decision.action}: {decision.reasoning}")
        return decision, True

    decision = fallback_action(message)
    logger.warning(f"Action extraction failed ({result.error}), keyword fallback -> {decision.action}")
    return decision, False


async def extract_action(message: str, llm: LLMService) -> ActionDecision:
    """
    Extract a structured action from a request

    Args:
        message: User message
        llm: Language model capability

    Returns:
        ActionDecision (model output, or the keyword fallback on failure)
    """
    decision, _ = await _extract(message, llm)
    return decision


# ============================================================================
# Dispatch
# ============================================================================

def _format_date(ticket: Ticket) -> str:
    created = ticket.created_at
    return f"{created.month}/{created.day}/{created.year}"


def _ticket_not_found(action: str, ticket_id: int) -> WorkflowResult:
    return WorkflowResult(
        action=action,
        success=False,
        message=f"I couldn't find ticket #{ticket_id}. Please verify the ticket number and try again.",
    )


async def _create_ticket(decision: CreateTicketAction, message: str, store: TicketRepository) -> WorkflowResult:
    ticket = await store.create(TicketCreate(
        title=decision.title or message[:50],
        description=decision.description or message,
        priority=decision.priority or Priority.MEDIUM,
        category=decision.category or Category.OTHER,
    ))
    return WorkflowResult(
        action="create_ticket",
        success=True,
        message=(
            f"I've created ticket #{ticket.id} for your issue: \"{ticket.title}\". "
            f"Priority: {ticket.priority.value}. A technician will review and respond within 24 hours."
        ),
        data=ticket,
    )


async def _check_status(decision: CheckStatusAction, store: TicketRepository) -> WorkflowResult:
    if not decision.ticket_id:
        return WorkflowResult(
            action="check_status",
            success=False,
            message="I'd be happy to check your ticket status. Could you please provide the ticket number?",
        )

    ticket = await store.get(decision.ticket_id)
    if ticket is None:
        return _ticket_not_found("check_status", decision.ticket_id)

    return WorkflowResult(
        action="check_status",
        success=True,
        message=(
            f"Ticket #{ticket.id}: \"{ticket.title}\"\n"
            f"• Status: {ticket.status.value}\n"
            f"• Priority: {ticket.priority.value}\n"
            f"• Category: {ticket.category.value}\n"
            f"• Created: {_format_date(ticket)}"
        ),
        data=ticket,
    )


async def _list_tickets(decision: ListTicketsAction, store: TicketRepository, limit: int) -> WorkflowResult:
    tickets = await store.list(decision.status_filter or "all", limit)
    if not tickets:
        return WorkflowResult(
            action="list_tickets",
            success=True,
            message="There are no tickets matching your criteria.",
            data=[],
        )

    ticket_list = "\n".join(
        f"• #{t.id}: {t.title} [{t.status.value}] - {t.priority.value}"
        for t in tickets
    )
    return WorkflowResult(
        action="list_tickets",
        success=True,
        message=f"Here are your recent tickets:\n{ticket_list}",
        data=tickets,
    )


async def _update_status(decision: UpdateStatusAction, message: str, store: TicketRepository) -> WorkflowResult:
    if not decision.ticket_id:
        return WorkflowResult(
            action="update_status",
            success=False,
            message="I'd be happy to update the ticket status. Could you please provide the ticket number?",
        )

    status = decision.new_status or infer_status_from_keywords(message)
    if status is None:
        return WorkflowResult(
            action="update_status",
            success=False,
            message="What status would you like to set? Options: open, in_progress, resolved, or closed.",
        )

    ticket = await store.update_status(decision.ticket_id, status)
    if ticket is None:
        return _ticket_not_found("update_status", decision.ticket_id)

    return WorkflowResult(
        action="update_status",
        success=True,
        message=f"Done! Ticket #{ticket.id} has been updated to \"{ticket.status.value}\".",
        data=ticket,
    )


def _analyze_logs(decision: AnalyzeLogsAction) -> WorkflowResult:
    if decision.system is None:
        return WorkflowResult(
            action="analyze_logs",
            success=False,
            message="Which system would you like me to analyze? Options: VPN, Email, Network, or Authentication.",
        )

    analysis = analyze_system_logs(decision.system)
    findings = "\n".join(f"• {finding}" for finding in analysis.findings)
    status_label = "✅ Healthy" if analysis.status == "healthy" else "⚠️ Warning"
    return WorkflowResult(
        action="analyze_logs",
        success=True,
        message=(
            f"**{decision.system.value.upper()} System Analysis**\n"
            f"Status: {status_label}\n\n"
            f"Findings:\n{findings}"
        ),
        data=analysis,
    )


async def execute_action(
    decision: ActionDecision,
    message: str,
    store: TicketRepository,
    list_limit: Optional[int] = None
) -> WorkflowResult:
    """
    Execute an extracted action against the ticket store

    Args:
        decision: Extracted action
        message: Original user message (used for defaults and status inference)
        store: Ticket repository
        list_limit: Max tickets for list_tickets (default: workflow_list_limit)

    Returns:
        WorkflowResult
    """
    if isinstance(decision, CreateTicketAction):
        return await _create_ticket(decision, message, store)
    if isinstance(decision, CheckStatusAction):
        return await _check_status(decision, store)
    if isinstance(decision, ListTicketsAction):
        limit = list_limit if list_limit is not None else settings.workflow_list_limit
        return await _list_tickets(decision, store, limit)
    if isinstance(decision, UpdateStatusAction):
        return await _update_status(decision, message, store)
    if isinstance(decision, PasswordResetAction):
        return WorkflowResult(action="password_reset", success=True, message=PASSWORD_RESET_MESSAGE)
    if isinstance(decision, AnalyzeLogsAction):
        return _analyze_logs(decision)

    return WorkflowResult(action="unknown", success=False, message=UNKNOWN_ACTION_MESSAGE)


async def execute_fallback(decision: ActionDecision, store: TicketRepository) -> WorkflowResult:
    """
    Execute a fallback decision

    Only ticket creation and password reset are re-dispatched; everything
    else becomes a generic error pointing at the helpdesk. Store failures
    propagate.
    """
    if isinstance(decision, CreateTicketAction):
        ticket = await store.create(TicketCreate(
            title=decision.title,
            description=decision.description or "",
            priority=Priority.MEDIUM,
            category=Category.OTHER,
        ))
        return WorkflowResult(
            action="create_ticket",
            success=True,
            message=f"I've created ticket #{ticket.id} for your issue. A technician will review it within 24 hours.",
            data=ticket,
        )

    if isinstance(decision, PasswordResetAction):
        return WorkflowResult(
            action="password_reset",
            success=True,
            message="I've initiated the password reset process. Please check your backup email for a verification code.",
        )

    return WorkflowResult(
        action="unknown",
        success=False,
        message=f"I encountered an error processing your request. Please try again or contact the helpdesk at {HELPDESK_PHONE}.",
    )


async def execute_workflow(
    message: str,
    llm: LLMService,
    store: TicketRepository,
    list_limit: Optional[int] = None
) -> WorkflowResult:
    """
    Extract an action from the message and execute it

    Args:
        message: User message
        llm: Language model capability
        store: Ticket repository
        list_limit: Max tickets for list_tickets (default: workflow_list_limit)

    Returns:
        WorkflowResult
    """
    decision, from_model = await _extract(message, llm)
    if not from_model:
        return await execute_fallback(decision, store)

    try:
        return await execute_action(decision, message, store, list_limit)
    except Exception as e:
        logger.error(f"Workflow execution failed for {decision.action}: {e}", exc_info=True)
        return await execute_fallback(fallback_action(message), store)
