"""
Configuration tests
"""
from helpdesk_bot.config import Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("LLM_PROVIDER", "WORKFLOW_LIST_LIMIT", "DIRECT_LIST_LIMIT", "METRICS_MAX_EVENTS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.llm_provider == "gemini"
        assert settings.workflow_list_limit == 5
        assert settings.direct_list_limit == 10
        assert settings.metrics_max_events == 1000
        assert settings.ticket_store == "memory"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        monkeypatch.setenv("knowledge_top_k", "5")

        settings = Settings(_env_file=None)

        assert settings.llm_provider == "openai"
        assert settings.knowledge_top_k == 5

    def test_qdrant_url(self):
        settings = Settings(_env_file=None, qdrant_host="qdrant.internal", qdrant_port=6334, qdrant_use_https=True)
        assert settings.QDRANT_URL == "https://qdrant.internal:6334"

    def test_cached(self):
        assert get_settings() is get_settings()
