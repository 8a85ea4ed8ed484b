"""
Unit tests for Vector Search Service
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from helpdesk_bot.services.vector_search import VectorSearchService


@pytest.fixture
def mock_qdrant_client():
    """Fixture for mock Qdrant client"""
    client = MagicMock()
    client.query_points.return_value = MagicMock(points=[
        MagicMock(score=0.92, payload={"content": "Restart the VPN client.", "metadata": {"title": "VPN"}}),
        MagicMock(score=0.61, payload={"content": "VPN requires MFA."}),
    ])
    return client


@pytest.fixture
def vector_service(mock_llm, mock_qdrant_client):
    return VectorSearchService(mock_llm, client=mock_qdrant_client, collection_name="kb_test")


class TestSearch:

    @pytest.mark.asyncio
    async def test_returns_ranked_documents(self, vector_service, mock_qdrant_client, mock_llm):
        documents = await vector_service.search("vpn keeps dropping", k=3)

        mock_llm.embed.assert_awaited_once_with("vpn keeps dropping")
        kwargs = mock_qdrant_client.query_points.call_args.kwargs
        assert kwargs["collection_name"] == "kb_test"
        assert kwargs["query"] == [0.1, 0.2, 0.3]
        assert kwargs["limit"] == 3

        assert [d.similarity for d in documents] == [0.92, 0.61]
        assert documents[0].content == "Restart the VPN client."
        assert documents[0].metadata == {"title": "VPN"}
        assert documents[1].metadata == {}

    @pytest.mark.asyncio
    async def test_no_hits(self, vector_service, mock_qdrant_client):
        mock_qdrant_client.query_points.return_value = MagicMock(points=[])

        assert await vector_service.search("unrelated") == []

    @pytest.mark.asyncio
    async def test_client_error_propagates(self, vector_service, mock_qdrant_client):
        mock_qdrant_client.query_points.side_effect = ConnectionError("qdrant down")

        with pytest.raises(ConnectionError):
            await vector_service.search("vpn")

    @pytest.mark.asyncio
    async def test_embedding_error_propagates(self, vector_service, mock_llm):
        mock_llm.embed = AsyncMock(side_effect=RuntimeError("embedding failed"))

        with pytest.raises(RuntimeError):
            await vector_service.search("vpn")
