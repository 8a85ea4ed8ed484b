"""
Agents for Helpdesk Bot

This module contains the intake, knowledge, workflow and escalation agents
and the LangGraph workflow that chains them.
"""

from helpdesk_bot.agents.intake import classify_request, classify_by_keywords
from helpdesk_bot.agents.workflow import execute_workflow, extract_action, execute_action
from helpdesk_bot.agents.escalation import escalate_to_human
from helpdesk_bot.agents.knowledge import answer_with_knowledge

__all__ = [
    "classify_request",
    "classify_by_keywords",
    "execute_workflow",
    "extract_action",
    "execute_action",
    "escalate_to_human",
    "answer_with_knowledge",
]
