"""
Unit tests for Intake Agent
"""
import pytest

from helpdesk_bot.agents.intake import classify_by_keywords, classify_request
from helpdesk_bot.models.schemas import Intent, IntentDecision


class TestKeywordClassification:
    """Test the deterministic fallback"""

    def test_ticket_keyword_routes_to_workflow(self):
        assert classify_by_keywords("I need a new ticket") == Intent.WORKFLOW

    def test_close_and_status_route_to_workflow(self):
        assert classify_by_keywords("Please CLOSE ticket 4") == Intent.WORKFLOW
        assert classify_by_keywords("What's the status of my request?") == Intent.WORKFLOW

    def test_human_routes_to_escalation(self):
        assert classify_by_keywords("Let me talk to a human") == Intent.ESCALATION
        assert classify_by_keywords("connect me with an agent") == Intent.ESCALATION

    def test_workflow_checked_before_escalation(self):
        """Workflow keywords win over escalation keywords"""
        assert classify_by_keywords("agent, check my ticket") == Intent.WORKFLOW

    def test_default_is_knowledge(self):
        assert classify_by_keywords("How do I connect to VPN?") == Intent.KNOWLEDGE


class TestClassifyRequest:
    """Test model classification with fallback"""

    @pytest.mark.asyncio
    async def test_uses_model_decision(self, program_llm):
        llm = program_llm(intent=Intent.ESCALATION)

        result = await classify_request("this isn't helping at all", llm)

        assert result == Intent.ESCALATION
        prompt, schema = llm.generate_structured.call_args.args
        assert schema is IntentDecision
        assert "this isn't helping at all" in prompt

    @pytest.mark.asyncio
    async def test_model_failure_uses_keywords(self, mock_llm):
        result = await classify_request("What's the status of ticket 12?", mock_llm)
        assert result == Intent.WORKFLOW

    @pytest.mark.asyncio
    async def test_model_failure_defaults_to_knowledge(self, mock_llm):
        result = await classify_request("What is the vacation policy?", mock_llm)
        assert result == Intent.KNOWLEDGE

    @pytest.mark.asyncio
    async def test_ticket_request_is_workflow_either_way(self, program_llm, mock_llm):
        """Model and fallback agree on explicit ticket requests"""
        fallback = await classify_request("I need a new ticket", mock_llm)

        llm = program_llm(intent=Intent.WORKFLOW)
        modelled = await classify_request("I need a new ticket", llm)

        assert fallback == modelled == Intent.WORKFLOW
