"""
Pydantic models for Helpdesk Bot

This module contains the ticket entity, the structured decisions produced by
the language model (intent and workflow action), handler results, metric
events and streaming event payloads.

The workflow action is a closed tagged union: each action carries only the
parameters that belong to it, and the model's raw JSON is validated against
the union at the LLM boundary.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, List, Literal, Union, Annotated

from pydantic import BaseModel, Field, ConfigDict


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


# ============================================================================
# Enums
# ============================================================================

class TicketStatus(str, Enum):
    """Valid ticket statuses"""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str, Enum):
    """Valid ticket priorities"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Category(str, Enum):
    """Valid ticket categories"""
    HARDWARE = "hardware"
    SOFTWARE = "software"
    NETWORK = "network"
    ACCESS = "access"
    OTHER = "other"


class Intent(str, Enum):
    """Coarse routing decision for an inbound message"""
    KNOWLEDGE = "knowledge"
    WORKFLOW = "workflow"
    ESCALATION = "escalation"


class LogSystem(str, Enum):
    """Systems covered by log analysis"""
    VPN = "vpn"
    EMAIL = "email"
    NETWORK = "network"
    AUTHENTICATION = "authentication"


class MetricType(str, Enum):
    """Kinds of metric events"""
    LATENCY = "latency"
    ROUTING = "routing"
    TICKET = "ticket"
    RETRIEVAL = "retrieval"
    ERROR = "error"


StatusFilter = Literal["open", "in_progress", "resolved", "closed", "all"]


# ============================================================================
# Ticket entity
# ============================================================================

class Ticket(BaseModel):
    """
    Support ticket, the only persisted entity.

    Attributes:
        id: Store-assigned identifier, immutable
        title: Short non-empty title
        description: Full problem description (may be empty)
        status: Lifecycle status, `open` at creation
        priority: Urgency, `medium` when unspecified
        category: Issue category, `other` when unspecified
        created_at: Creation timestamp
        updated_at: Last mutation timestamp (>= created_at)
    """
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Ticket ID")
    title: str = Field(..., min_length=1, description="Ticket title")
    description: str = Field("", description="Problem description")
    status: TicketStatus = Field(TicketStatus.OPEN, description="Ticket status")
    priority: Priority = Field(Priority.MEDIUM, description="Ticket priority")
    category: Category = Field(Category.OTHER, description="Ticket category")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")


class TicketCreate(BaseModel):
    """Schema for creating a new ticket (without generated fields)"""
    title: str = Field(..., min_length=1, description="Ticket title")
    description: str = Field("", description="Problem description")
    priority: Priority = Field(Priority.MEDIUM, description="Ticket priority")
    category: Category = Field(Category.OTHER, description="Ticket category")


class TicketStatusUpdate(BaseModel):
    """Schema for a status change request"""
    status: TicketStatus


# ============================================================================
# LLM structured outputs
# ============================================================================

class IntentDecision(BaseModel):
    """Classifier output: one label plus a justification used for logging"""
    intent: Intent
    reason: str = Field("", description="Brief explanation of why this intent was chosen")


class _ActionBase(BaseModel):
    reasoning: str = Field("", description="Brief explanation of why this action was chosen")


class CreateTicketAction(_ActionBase):
    action: Literal["create_ticket"] = "create_ticket"
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None


class CheckStatusAction(_ActionBase):
    action: Literal["check_status"] = "check_status"
    ticket_id: Optional[int] = None


class ListTicketsAction(_ActionBase):
    action: Literal["list_tickets"] = "list_tickets"
    status_filter: Optional[StatusFilter] = None


class UpdateStatusAction(_ActionBase):
    action: Literal["update_status"] = "update_status"
    ticket_id: Optional[int] = None
    new_status: Optional[TicketStatus] = None


class PasswordResetAction(_ActionBase):
    action: Literal["password_reset"] = "password_reset"


class AnalyzeLogsAction(_ActionBase):
    action: Literal["analyze_logs"] = "analyze_logs"
    system: Optional[LogSystem] = None


class UnknownAction(_ActionBase):
    action: Literal["unknown"] = "unknown"


ActionDecision = Annotated[
    Union[
        CreateTicketAction,
        CheckStatusAction,
        ListTicketsAction,
        UpdateStatusAction,
        PasswordResetAction,
        AnalyzeLogsAction,
        UnknownAction,
    ],
    Field(discriminator="action"),
]


# ============================================================================
# Handler results
# ============================================================================

class LogAnalysis(BaseModel):
    """Canned log analysis result"""
    status: str
    findings: List[str]


class WorkflowResult(BaseModel):
    """Outcome of a dispatched workflow action"""
    action: str
    success: bool
    message: str
    data: Optional[Union[Ticket, List[Ticket], LogAnalysis]] = None


class EscalationResult(BaseModel):
    """Outcome of a handoff to a human agent"""
    ticket_id: int
    message: str
    ticket: Ticket


class RetrievedDocument(BaseModel):
    """Knowledge base search hit"""
    content: str
    similarity: float
    metadata: Dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Metrics
# ============================================================================

class MetricEvent(BaseModel):
    """Immutable metric event"""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=utcnow)
    type: MetricType
    agent: Optional[str] = None
    duration_ms: Optional[float] = None
    success: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AgentStats(BaseModel):
    """Per-agent latency aggregate"""
    count: int
    avg_latency_ms: float


class MetricsSummary(BaseModel):
    """Rolling aggregate over a lookback window"""
    total_requests: int
    average_latency_ms: int
    routing_accuracy: float
    ticket_success_rate: float
    retrieval_hit_rate: float
    error_rate: float
    by_agent: Dict[str, AgentStats] = Field(default_factory=dict)


# ============================================================================
# API Models
# ============================================================================

class ChatMessage(BaseModel):
    role: str = "user"
    content: str


class ChatRequest(BaseModel):
    """Chat request; the last message is the one routed"""
    messages: List[ChatMessage] = Field(..., min_length=1)
    stream: bool = True


class ChatReply(BaseModel):
    """Non-streaming chat response"""
    intent: Optional[Intent] = None
    agent: Optional[str] = None
    agent_output: str = ""
    reply: str
