"""
Vector Search Service using Qdrant

Semantic retrieval over the IT support knowledge base. Query embeddings come
from the LLM service so they share the embedding model used at ingestion.
"""
import asyncio
from typing import List, Optional

from qdrant_client import QdrantClient

from helpdesk_bot.config import get_settings
from helpdesk_bot.models.schemas import RetrievedDocument
from helpdesk_bot.services.llm_service import LLMService
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


class VectorSearchService:
    """Service for vector-based semantic search using Qdrant"""

    def __init__(
        self,
        llm: LLMService,
        client: Optional[QdrantClient] = None,
        collection_name: Optional[str] = None
    ):
        """
        Initialize Qdrant client

        Args:
            llm: LLM service used for query embeddings
            client: Pre-built Qdrant client (default from settings)
            collection_name: Knowledge collection (default from settings)
        """
        self.llm = llm
        self.client = client or QdrantClient(
            url=settings.QDRANT_URL,
            api_key=settings.QDRANT_API_KEY or None
        )
        self.collection_name = collection_name or settings.knowledge_collection

    async def search(self, query: str, k: int = 3) -> List[RetrievedDocument]:
        """
        Return up to k documents ranked by similarity

        Args:
            query: Natural-language query
            k: Maximum number of documents

        Returns:
            List of RetrievedDocument, best match first
        """
        query_vector = await self.llm.embed(query)

        try:
            response = await asyncio.to_thread(
                self.client.query_points,
                collection_name=self.collection_name,
                query=query_vector,
                limit=k,
                with_payload=True
            )
        except Exception as e:
            logger.error(f"Knowledge search failed in '{self.collection_name}': {e}")
            raise

        documents = []
        for point in response.points:
            payload = point.payload or {}
            documents.append(RetrievedDocument(
                content=payload.get("content", ""),
                similarity=point.score,
                metadata=payload.get("metadata") or {},
            ))

        logger.info(f"Knowledge search returned {len(documents)} documents")
        return documents
