"""
Pydantic models for Helpdesk Bot
"""

from helpdesk_bot.models.schemas import (
    # Enums
    TicketStatus,
    Priority,
    Category,
    Intent,
    LogSystem,
    MetricType,

    # Ticket entity
    Ticket,
    TicketCreate,
    TicketStatusUpdate,

    # LLM structured outputs
    IntentDecision,
    ActionDecision,
    CreateTicketAction,
    CheckStatusAction,
    ListTicketsAction,
    UpdateStatusAction,
    PasswordResetAction,
    AnalyzeLogsAction,
    UnknownAction,

    # Handler results
    LogAnalysis,
    WorkflowResult,
    EscalationResult,
    RetrievedDocument,

    # Metrics
    MetricEvent,
    MetricsSummary,

    # API Models
    ChatMessage,
    ChatRequest,
    ChatReply,
)

__all__ = [
    "TicketStatus",
    "Priority",
    "Category",
    "Intent",
    "LogSystem",
    "MetricType",
    "Ticket",
    "TicketCreate",
    "TicketStatusUpdate",
    "IntentDecision",
    "ActionDecision",
    "CreateTicketAction",
    "CheckStatusAction",
    "ListTicketsAction",
    "UpdateStatusAction",
    "PasswordResetAction",
    "AnalyzeLogsAction",
    "UnknownAction",
    "LogAnalysis",
    "WorkflowResult",
    "EscalationResult",
    "RetrievedDocument",
    "MetricEvent",
    "MetricsSummary",
    "ChatMessage",
    "ChatRequest",
    "ChatReply",
]
