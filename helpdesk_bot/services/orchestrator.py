"""
Orchestrator Service - request pipeline

Sequences classification → handling → response synthesis for one message.

Two modes:
- stream_chat: async generator of ordered events for SSE
  (status* → text* → done). Any failure collapses into one apology text
  event followed by done; the stream always ends with done.
- process_chat: runs the compiled LangGraph workflow and returns a single
  ChatReply.

Latency, routing and ticket metrics are recorded on the injected
MetricsTracker.
"""
import time
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, Optional

from helpdesk_bot.agents.escalation import escalate_to_human
from helpdesk_bot.agents.graph import compile_workflow
from helpdesk_bot.agents.intake import classify_request
from helpdesk_bot.agents.knowledge import answer_with_knowledge
from helpdesk_bot.agents.workflow import execute_workflow
from helpdesk_bot.models.graph_state import create_initial_state
from helpdesk_bot.models.schemas import ChatReply, Intent, Ticket, WorkflowResult
from helpdesk_bot.repositories.ticket_repository import TicketRepository
from helpdesk_bot.services.llm_service import LLMService
from helpdesk_bot.services.metrics import MetricsTracker
from helpdesk_bot.services.vector_search import VectorSearchService
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)

APOLOGY_MESSAGE = "I apologize, but I encountered an error. Please try again."

# Status event emitted before each handler runs
HANDLER_STATUS = {
    Intent.KNOWLEDGE: ("Knowledge", "Searching knowledge base..."),
    Intent.WORKFLOW: ("Workflow", "Processing your request..."),
    Intent.ESCALATION: ("Escalation", "Connecting to human support..."),
}

SYNTHESIS_PROMPT = """You are a helpful IT Support Assistant.
You have just received information from the {agent} agent regarding the user's query.

User Query: "{message}"
Agent Output: "{agent_output}"

Goal: Communicate this information to the user in a friendly and professional manner.
If the agent output is an answer, provide it clearly.
If it's a ticket confirmation, confirm it warmly.
If the agent output asks for clarification, ask the user politely.

Keep your response concise and helpful. Don't add information that wasn't in the agent output."""


def status_event(agent: str, status: str) -> Dict[str, Any]:
    return {"type": "status", "agent": agent, "status": status}


def text_event(content: str) -> Dict[str, Any]:
    return {"type": "text", "content": content}


def done_event() -> Dict[str, Any]:
    return {"type": "done"}


def build_synthesis_prompt(agent: str, message: str, agent_output: str) -> str:
    """Prompt for turning a handler result into the final reply"""
    return SYNTHESIS_PROMPT.format(agent=agent, message=message, agent_output=agent_output)


@dataclass
class HandlerOutput:
    """Textual handler result plus the structured workflow outcome, if any"""
    agent: str
    text: str
    workflow_result: Optional[WorkflowResult] = None


class OrchestratorService:
    """
    Per-request pipeline over the intake, knowledge, workflow and
    escalation agents.

    Workflow:
    1. Classify intent (tracked as "intake", routing metric recorded)
    2. Run the handler selected by the intent (tracked under its name)
    3. Synthesize the final reply with the language model
    """

    def __init__(
        self,
        llm: LLMService,
        store: TicketRepository,
        retriever: VectorSearchService,
        metrics: MetricsTracker,
        list_limit: Optional[int] = None
    ):
        self.llm = llm
        self.store = store
        self.retriever = retriever
        self.metrics = metrics
        self.list_limit = list_limit
        self._workflow = None

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    async def classify(self, message: str, request_start: Optional[float] = None) -> Intent:
        """Classify and record the routing decision"""
        request_start = request_start if request_start is not None else time.perf_counter()

        intent = await self.metrics.track(
            "intake",
            lambda: classify_request(message, self.llm)
        )
        # No independent ground truth: the prediction is also the actual route
        self.metrics.record_routing(
            intent.value,
            None,
            (time.perf_counter() - request_start) * 1000
        )
        return intent

    async def handle(self, intent: Intent, message: str) -> HandlerOutput:
        """Run the handler owning this intent"""
        if intent == Intent.KNOWLEDGE:
            answer = await self.metrics.track(
                "knowledge",
                lambda: answer_with_knowledge(message, self.llm, self.retriever, self.metrics)
            )
            return HandlerOutput(agent="knowledge", text=answer)

        if intent == Intent.WORKFLOW:
            result = await self.metrics.track(
                "workflow",
                lambda: execute_workflow(message, self.llm, self.store, self.list_limit)
            )
            if result.action == "create_ticket":
                ticket_id = result.data.id if isinstance(result.data, Ticket) else None
                self.metrics.record_ticket_creation(result.success, ticket_id)
            return HandlerOutput(agent="workflow", text=result.message, workflow_result=result)

        escalation = await self.metrics.track(
            "escalation",
            lambda: escalate_to_human(message, self.store)
        )
        self.metrics.record_ticket_creation(True, escalation.ticket_id)
        return HandlerOutput(agent="escalation", text=escalation.message)

    async def synthesize(self, agent: str, message: str, agent_output: str) -> str:
        """Non-streaming synthesis used by the graph workflow"""
        return await self.llm.generate_text(build_synthesis_prompt(agent, message, agent_output))

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------
    async def stream_chat(self, message: str) -> AsyncGenerator[Dict[str, Any], None]:
        """
        Process a message with streaming progress events.

        Yields:
            status / text events, then exactly one done event
        """
        request_start = time.perf_counter()

        try:
            yield status_event("Intake", "Analyzing your request...")
            intent = await self.classify(message, request_start)

            agent_label, agent_status = HANDLER_STATUS[intent]
            yield status_event(agent_label, agent_status)
            output = await self.handle(intent, message)

            yield status_event("Response", "Generating response...")
            prompt = build_synthesis_prompt(output.agent, message, output.text)
            async for chunk in self.llm.stream_text(prompt):
                yield text_event(chunk)

        except Exception as e:
            logger.error(f"Streaming error: {e}", exc_info=True)
            yield text_event(APOLOGY_MESSAGE)

        yield done_event()

    async def process_chat(self, message: str) -> ChatReply:
        """
        Process a message without streaming (LangGraph workflow).

        Returns:
            ChatReply; on failure the reply is the apology message
        """
        if self._workflow is None:
            self._workflow = compile_workflow(self)

        try:
            state = await self._workflow.ainvoke(create_initial_state(message))
        except Exception as e:
            logger.error(f"Workflow error: {e}", exc_info=True)
            return ChatReply(reply=APOLOGY_MESSAGE)

        return ChatReply(
            intent=state.get("intent"),
            agent=state.get("agent"),
            agent_output=state.get("agent_output") or "",
            reply=state.get("reply") or "",
        )
