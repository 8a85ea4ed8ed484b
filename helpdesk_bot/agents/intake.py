"""
Intake Agent - intent classification

Decides which handler owns a request: knowledge, workflow or escalation.
The language model classifies first; a keyword pass takes over whenever the
model call fails or returns something outside the taxonomy.
"""
from helpdesk_bot.models.schemas import Intent, IntentDecision
from helpdesk_bot.services.llm_service import LLMService, LLMSuccess
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)

WORKFLOW_KEYWORDS = ("ticket", "close", "status")
ESCALATION_KEYWORDS = ("human", "agent")

CLASSIFICATION_PROMPT = """Classify the following IT support request into one of these categories:

- knowledge: Questions about policies, how-to guides, information retrieval, or general inquiries. (e.g., "how do I connect to VPN?", "what is the vacation policy?", "access denied error")
- workflow: Requests that require an action to be performed, such as creating a ticket, resetting a password, or checking status. (e.g., "reset my password", "file a ticket", "my wifi is broken")
- escalation: Requests to speak to a human, frustration expression, or complicated issues the bot clearly cannot handle. (e.g., "talk to agent", "this isn't helping")

Return the field "intent" (one of: knowledge, workflow, escalation) and a brief "reason".

Request: "{message}"
"""


def classify_by_keywords(message: str) -> Intent:
    """
    Deterministic fallback classification

    Workflow keywords are checked before escalation keywords, which are
    checked before the knowledge default.
    """
    lower_msg = message.lower()
    if any(kw in lower_msg for kw in WORKFLOW_KEYWORDS):
        return Intent.WORKFLOW
    if any(kw in lower_msg for kw in ESCALATION_KEYWORDS):
        return Intent.ESCALATION
    return Intent.KNOWLEDGE


async def classify_request(message: str, llm: LLMService) -> Intent:
    """
    Classify a support request

    Args:
        message: User message
        llm: Language model capability

    Returns:
        Intent (never raises on model failure)
    """
    result = await llm.generate_structured(
        CLASSIFICATION_PROMPT.format(message=message),
        IntentDecision
    )

    if isinstance(result, LLMSuccess):
        decision: IntentDecision = result.value
        logger.info(f"Classified as {decision.intent.value}: {decision.reason}")
        return decision.intent

    intent = classify_by_keywords(message)
    logger.warning(f"Classification failed ({result.error}), keyword fallback -> {intent.value}")
    return intent
