"""
Knowledge Agent - answers informational requests from the knowledge base

Retrieves the top documents and has the language model answer from them.
"""
import time
from typing import Optional

from helpdesk_bot.config import get_settings
from helpdesk_bot.services.llm_service import LLMService
from helpdesk_bot.services.metrics import MetricsTracker
from helpdesk_bot.services.vector_search import VectorSearchService
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

NO_RESULTS_MESSAGE = (
    "I couldn't find any information about that in my knowledge base. "
    "Would you like me to create a ticket or connect you with a support agent?"
)

ANSWER_PROMPT = """You are an IT support knowledge assistant. Answer the user's question using only the context below.
If the context does not contain the answer, say so briefly.

Context:
{context}

Question: "{message}"
"""


async def answer_with_knowledge(
    message: str,
    llm: LLMService,
    retriever: VectorSearchService,
    metrics: Optional[MetricsTracker] = None
) -> str:
    """
    Answer a question from the knowledge base

    Args:
        message: User question
        llm: Language model capability
        retriever: Knowledge base search
        metrics: Tracker for the retrieval metric (optional)

    Returns:
        Answer text

    Raises:
        LLMServiceError: Embedding or answer generation failed
    """
    start = time.perf_counter()
    documents = await retriever.search(message, settings.knowledge_top_k)
    if metrics is not None:
        metrics.record_retrieval(message, len(documents), (time.perf_counter() - start) * 1000)

    if not documents:
        logger.info("No knowledge base documents matched")
        return NO_RESULTS_MESSAGE

    context = "\n\n---\n\n".join(doc.content for doc in documents)
    return await llm.generate_text(ANSWER_PROMPT.format(context=context, message=message))
