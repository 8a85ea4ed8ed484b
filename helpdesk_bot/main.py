"""
Helpdesk Bot - FastAPI Backend
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helpdesk_bot.config import get_settings
from helpdesk_bot.middleware.logging_middleware import LoggingMiddleware
from helpdesk_bot.repositories.ticket_repository import create_ticket_repository
from helpdesk_bot.routes import chat, diagnostics, health, metrics, tickets
from helpdesk_bot.services.llm_service import LLMService
from helpdesk_bot.services.metrics import MetricsTracker
from helpdesk_bot.services.orchestrator import OrchestratorService
from helpdesk_bot.services.vector_search import VectorSearchService
from helpdesk_bot.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the process-wide components once and share them via app.state"""
    logger.info(f"Starting Helpdesk Bot ({settings.fastapi_env})")

    metrics_tracker = MetricsTracker(settings.metrics_max_events)
    ticket_store = create_ticket_repository(settings)
    llm = LLMService()
    retriever = VectorSearchService(llm)

    app.state.metrics = metrics_tracker
    app.state.ticket_store = ticket_store
    app.state.llm = llm
    app.state.orchestrator = OrchestratorService(
        llm=llm,
        store=ticket_store,
        retriever=retriever,
        metrics=metrics_tracker,
        list_limit=settings.workflow_list_limit,
    )

    logger.info(f"Ticket store: {type(ticket_store).__name__}")

    yield

    logger.info("Shutting down Helpdesk Bot")


app = FastAPI(
    title="Helpdesk Bot",
    description="IT support assistant with intent routing and SSE streaming",
    version=health.VERSION,
    lifespan=lifespan
)

# Middleware runs bottom-up: CORS wraps logging
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat.router)
app.include_router(tickets.router)
app.include_router(diagnostics.router)
app.include_router(metrics.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "Helpdesk Bot API", "version": health.VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.fastapi_host, port=settings.fastapi_port)
