"""
API route tests

The lifespan is not run: app.state is wired with the in-memory store,
the mocked LLM and a fresh metrics tracker.
"""
import json

import pytest
from fastapi.testclient import TestClient

from helpdesk_bot.main import app
from helpdesk_bot.services.orchestrator import OrchestratorService

STATE_NAMES = ("metrics", "ticket_store", "orchestrator")


@pytest.fixture
def client(mock_llm, ticket_store, mock_retriever, metrics):
    app.state.metrics = metrics
    app.state.ticket_store = ticket_store
    app.state.orchestrator = OrchestratorService(
        llm=mock_llm,
        store=ticket_store,
        retriever=mock_retriever,
        metrics=metrics,
        list_limit=5,
    )
    yield TestClient(app)
    for name in STATE_NAMES:
        if hasattr(app.state, name):
            delattr(app.state, name)


def parse_sse(body: str):
    return [
        json.loads(record[len("data: "):])
        for record in body.split("\n\n")
        if record.startswith("data: ")
    ]


def create(client, title, **fields):
    response = client.post("/api/tickets", json={"title": title, **fields})
    assert response.status_code == 201
    return response.json()


class TestHealth:

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "uptime_seconds" in data
        assert "X-Process-Time" not in response.headers

    def test_root(self, client):
        response = client.get("/")
        assert response.json()["message"] == "Helpdesk Bot API"
        assert "X-Process-Time" in response.headers


class TestTicketRoutes:
    """Direct ticket tools"""

    def test_create_and_get(self, client):
        ticket = create(client, "Monitor not working", priority="high", category="hardware")

        assert ticket["status"] == "open"
        fetched = client.get(f"/api/tickets/{ticket['id']}").json()
        assert fetched == ticket

    def test_get_missing(self, client):
        response = client.get("/api/tickets/404")
        assert response.status_code == 404

    def test_create_requires_title(self, client):
        response = client.post("/api/tickets", json={"title": ""})
        assert response.status_code == 422

    def test_list_default_limit_is_ten(self, client):
        for i in range(12):
            create(client, f"Issue {i + 1}")

        tickets = client.get("/api/tickets").json()

        assert [t["id"] for t in tickets] == list(range(12, 2, -1))

    def test_list_with_filter_and_limit(self, client):
        for i in range(4):
            create(client, f"Issue {i + 1}")
        client.patch("/api/tickets/2/status", json={"status": "resolved"})

        assert len(client.get("/api/tickets", params={"limit": 2}).json()) == 2
        resolved = client.get("/api/tickets", params={"status": "resolved"}).json()
        assert [t["id"] for t in resolved] == [2]

    def test_list_invalid_filter(self, client):
        response = client.get("/api/tickets", params={"status": "archived"})
        assert response.status_code == 422

    def test_update_status(self, client):
        ticket = create(client, "Printer jam")

        response = client.patch(f"/api/tickets/{ticket['id']}/status", json={"status": "closed"})

        assert response.status_code == 200
        assert response.json()["status"] == "closed"

    def test_update_status_missing(self, client):
        response = client.patch("/api/tickets/77/status", json={"status": "closed"})
        assert response.status_code == 404

    def test_update_status_invalid(self, client):
        ticket = create(client, "Printer jam")
        response = client.patch(f"/api/tickets/{ticket['id']}/status", json={"status": "archived"})
        assert response.status_code == 422


class TestDiagnosticsRoute:

    def test_email(self, client):
        data = client.get("/api/diagnostics/email", params={"time_range": "1h"}).json()

        assert data["system"] == "email"
        assert data["time_range"] == "1h"
        assert "analyzed_at" in data
        assert data["status"] == "warning"
        assert len(data["findings"]) == 3

    def test_invalid_time_range(self, client):
        response = client.get("/api/diagnostics/vpn", params={"time_range": "30d"})
        assert response.status_code == 400

    def test_unknown_system(self, client):
        response = client.get("/api/diagnostics/printer")
        assert response.status_code == 422


class TestChatRoute:

    def test_streaming(self, client):
        response = client.post("/api/chat", json={
            "messages": [{"role": "user", "content": "How do I connect to VPN?"}]
        })

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"

        events = parse_sse(response.text)
        assert [e["agent"] for e in events if e["type"] == "status"] == ["Intake", "Knowledge", "Response"]
        assert "".join(e["content"] for e in events if e["type"] == "text") == "Here is your answer."
        assert events[-1] == {"type": "done"}

    def test_last_message_is_routed(self, client, ticket_store):
        response = client.post("/api/chat", json={
            "messages": [
                {"role": "user", "content": "How do I connect to VPN?"},
                {"role": "user", "content": "Actually, I want a human"},
            ]
        })

        statuses = [e["agent"] for e in parse_sse(response.text) if e["type"] == "status"]
        assert statuses[1] == "Escalation"

    def test_non_streaming(self, client):
        response = client.post("/api/chat", json={
            "messages": [{"role": "user", "content": "What is the vacation policy?"}],
            "stream": False,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["intent"] == "knowledge"
        assert data["agent"] == "knowledge"
        assert data["reply"] == "Synthesized reply"

    def test_empty_message(self, client):
        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "   "}]})
        assert response.status_code == 400

    def test_no_messages(self, client):
        response = client.post("/api/chat", json={"messages": []})
        assert response.status_code == 422

    def test_not_initialized(self, client):
        del app.state.orchestrator

        response = client.post("/api/chat", json={"messages": [{"content": "hi"}]})

        assert response.status_code == 503


class TestMetricsRoute:

    def test_metrics_after_chat(self, client):
        client.post("/api/chat", json={"messages": [{"content": "How do I connect to VPN?"}]})

        data = client.get("/api/metrics").json()

        assert data["success"] is True
        assert data["last_hour"]["total_requests"] == 2
        assert data["last_24_hours"]["routing_accuracy"] == 1.0
        assert len(data["recent_events"]) <= 20
        assert {e["type"] for e in data["recent_events"]} >= {"latency", "routing", "retrieval"}
