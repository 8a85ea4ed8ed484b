"""
LangGraph orchestrator - workflow graph assembly

Non-streaming request flow:
1. START → classify
2. classify → (knowledge | workflow | escalation)
3. handler → synthesize
4. synthesize → END
"""
from typing import Literal

from langgraph.graph import StateGraph, END

from helpdesk_bot.models.graph_state import AgentState
from helpdesk_bot.models.schemas import Intent
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)


def route_condition(state: AgentState) -> Literal["knowledge", "workflow", "escalation"]:
    """
    Read the classified intent and pick the handler node
    """
    intent = state.get("intent") or Intent.KNOWLEDGE.value
    logger.debug(f"Routing to: {intent}")
    return intent


def build_graph(service) -> StateGraph:
    """
    Build the LangGraph workflow graph

    Args:
        service: OrchestratorService providing classify / handle / synthesize

    Returns:
        Uncompiled StateGraph
    """

    async def classify_node(state: AgentState) -> dict:
        intent = await service.classify(state["message"])
        logger.info(f"Router decision: {intent.value}")
        return {"intent": intent.value}

    def handler_node(intent: Intent):
        async def node(state: AgentState) -> dict:
            output = await service.handle(intent, state["message"])
            workflow_result = (
                output.workflow_result.model_dump(mode="json")
                if output.workflow_result else None
            )
            return {
                "agent": output.agent,
                "agent_output": output.text,
                "workflow_result": workflow_result,
            }
        return node

    async def synthesize_node(state: AgentState) -> dict:
        reply = await service.synthesize(
            state["agent"],
            state["message"],
            state["agent_output"]
        )
        return {"reply": reply}

    graph = StateGraph(AgentState)

    graph.add_node("classify", classify_node)
    graph.add_node("knowledge", handler_node(Intent.KNOWLEDGE))
    graph.add_node("workflow", handler_node(Intent.WORKFLOW))
    graph.add_node("escalation", handler_node(Intent.ESCALATION))
    graph.add_node("synthesize", synthesize_node)

    graph.set_entry_point("classify")

    graph.add_conditional_edges(
        "classify",
        route_condition,
        {
            "knowledge": "knowledge",
            "workflow": "workflow",
            "escalation": "escalation"
        }
    )

    graph.add_edge("knowledge", "synthesize")
    graph.add_edge("workflow", "synthesize")
    graph.add_edge("escalation", "synthesize")
    graph.add_edge("synthesize", END)

    logger.info("LangGraph workflow graph built successfully")
    return graph


def compile_workflow(service):
    """
    Compile the workflow graph for a service instance

    Returns:
        Compiled LangGraph workflow
    """
    graph = build_graph(service)
    return graph.compile()
