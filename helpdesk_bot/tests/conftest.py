"""
pytest configuration and shared fixtures

The language model and the knowledge retriever are always mocked; the
ticket store is the in-memory implementation.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from helpdesk_bot.models.schemas import IntentDecision, RetrievedDocument
from helpdesk_bot.repositories.ticket_repository import InMemoryTicketRepository
from helpdesk_bot.services.llm_service import LLMFailure, LLMSuccess
from helpdesk_bot.services.metrics import MetricsTracker


def stream_of(*chunks):
    """side_effect for stream_text yielding the given chunks"""
    async def _stream(prompt):
        for chunk in chunks:
            yield chunk
    return _stream


@pytest.fixture
def ticket_store():
    """Fresh in-memory ticket store"""
    return InMemoryTicketRepository()


@pytest.fixture
def metrics():
    """Fresh metrics tracker"""
    return MetricsTracker(max_events=1000)


@pytest.fixture
def mock_llm():
    """
    Mock LLM service

    Structured calls fail by default, so agents take their keyword fallback
    unless a test programs a decision.
    """
    llm = MagicMock()
    llm.generate_structured = AsyncMock(return_value=LLMFailure(error="model offline"))
    llm.generate_text = AsyncMock(return_value="Synthesized reply")
    llm.stream_text = MagicMock(side_effect=stream_of("Here is ", "your answer."))
    llm.embed = AsyncMock(return_value=[0.1, 0.2, 0.3])
    return llm


@pytest.fixture
def program_llm(mock_llm):
    """
    Program structured decisions on the mock LLM

    Usage:
        program_llm(intent=Intent.WORKFLOW, action=CreateTicketAction(...))

    A decision left as None makes that call fail.
    """
    def _program(intent=None, action=None):
        async def _generate(prompt, schema):
            if schema is IntentDecision:
                if intent is None:
                    return LLMFailure(error="no intent programmed")
                return LLMSuccess(IntentDecision(intent=intent, reason="test"))
            if action is None:
                return LLMFailure(error="no action programmed")
            return LLMSuccess(action)

        mock_llm.generate_structured.side_effect = _generate
        return mock_llm

    return _program


@pytest.fixture
def sample_documents():
    return [
        RetrievedDocument(
            content="To connect to VPN, open the GlobalProtect client and sign in with SSO.",
            similarity=0.91,
            metadata={"title": "VPN Setup"},
        ),
        RetrievedDocument(
            content="VPN access requires an active employee account.",
            similarity=0.74,
            metadata={"title": "VPN Access Policy"},
        ),
    ]


@pytest.fixture
def mock_retriever(sample_documents):
    """Mock knowledge retriever returning two documents"""
    retriever = MagicMock()
    retriever.search = AsyncMock(return_value=sample_documents)
    return retriever
