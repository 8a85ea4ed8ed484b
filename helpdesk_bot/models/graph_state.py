"""
LangGraph State Schema for Helpdesk Bot

State Flow:
    1. message: Inbound user message
    2. intent: Classifier decision (knowledge | workflow | escalation)
    3. agent / agent_output: Handler name and its textual result
    4. workflow_result: Structured workflow outcome (workflow path only)
    5. reply: Synthesized natural-language response
"""
from typing import TypedDict, Optional, Dict, Any
from typing_extensions import NotRequired


class AgentState(TypedDict):
    """
    LangGraph workflow state.

    All fields except `message` are optional (NotRequired) to allow partial
    state updates from individual nodes.
    """
    message: str
    intent: NotRequired[Optional[str]]
    agent: NotRequired[Optional[str]]
    agent_output: NotRequired[Optional[str]]
    workflow_result: NotRequired[Optional[Dict[str, Any]]]
    reply: NotRequired[Optional[str]]


def create_initial_state(message: str) -> AgentState:
    """
    Create initial workflow state from an inbound message.

    Args:
        message: User message text

    Returns:
        AgentState with only the message populated
    """
    return AgentState(message=message)

