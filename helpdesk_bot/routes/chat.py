"""
Chat API Routes

Routes one user message through the support pipeline, either as a
Server-Sent Events (SSE) stream of progress/text events or as a single
JSON reply.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from typing import Any, AsyncGenerator, Dict
import json

from helpdesk_bot.models.schemas import ChatReply, ChatRequest
from helpdesk_bot.routes.dependencies import get_orchestrator
from helpdesk_bot.services.orchestrator import OrchestratorService
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


# SSE Streaming Helper

def format_sse(event: Dict[str, Any]) -> str:
    """
    Render one event as an SSE record.

    Format:
        data: {"type": "status", "agent": "...", "status": "..."}\\n\\n
    """
    return f"data: {json.dumps(event)}\n\n"


async def sse_generator(
    events: AsyncGenerator[Dict[str, Any], None]
) -> AsyncGenerator[str, None]:
    """
    Convert the orchestrator event stream to SSE format.

    The orchestrator already terminates every stream with a done event,
    including after failures.
    """
    async for event in events:
        yield format_sse(event)


# Routes

@router.post("/chat", response_model=ChatReply)
async def chat(
    request: ChatRequest,
    orchestrator: OrchestratorService = Depends(get_orchestrator)
):
    """
    Handle a chat message.

    Returns:
        StreamingResponse with SSE events when `stream` is true,
        otherwise a ChatReply
    """
    message = request.messages[-1].content.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message content must not be empty")

    logger.info(f"Chat request (stream={request.stream}): {message[:80]}")

    if request.stream:
        return StreamingResponse(
            sse_generator(orchestrator.stream_chat(message)),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "X-Accel-Buffering": "no"  # Disable nginx buffering
            }
        )

    return await orchestrator.process_chat(message)
