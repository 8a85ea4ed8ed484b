"""
Helpdesk Bot - Configuration Management
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # FastAPI
    fastapi_env: str = "development"
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000

    # LLM
    llm_provider: str = "gemini"  # gemini | openai
    openai_api_key: str = ""
    google_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    openai_model: str = "gpt-4o-mini"
    gemini_embedding_model: str = "models/text-embedding-004"
    openai_embedding_model: str = "text-embedding-3-small"
    llm_max_retries: int = 1

    # Qdrant (knowledge base)
    qdrant_host: str = "localhost"
    qdrant_port: int = 6333
    qdrant_api_key: str = ""
    qdrant_use_https: bool = False
    knowledge_collection: str = "it_support_kb"
    knowledge_top_k: int = 3

    # Ticket store
    ticket_store: str = "memory"  # memory | supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: str = ""

    # Ticket listing: chat workflow vs. direct tool endpoint
    workflow_list_limit: int = 5
    direct_list_limit: int = 10

    # Metrics
    metrics_max_events: int = 1000

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

    @property
    def QDRANT_URL(self) -> str:
        """Construct Qdrant URL from host and port"""
        protocol = "https" if self.qdrant_use_https else "http"
        return f"{protocol}://{self.qdrant_host}:{self.qdrant_port}"

    @property
    def QDRANT_API_KEY(self) -> str:
        """Qdrant API key"""
        return self.qdrant_api_key


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
