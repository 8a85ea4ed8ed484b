"""
Business Logic Services

OrchestratorService lives in helpdesk_bot.services.orchestrator and is not
re-exported here: it depends on the agents, which depend on these services.
"""
from .llm_service import LLMService
from .metrics import MetricsTracker
from .vector_search import VectorSearchService

__all__ = [
    "LLMService",
    "MetricsTracker",
    "VectorSearchService",
]
