"""
Logging Middleware - Request/Response logging
"""
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)

# Liveness probes are too noisy to log
SKIP_PATHS = ("/api/health",)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request with its status code and duration

    For SSE responses the duration covers time to first byte only; the
    stream body is still being produced after the log line.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        method = request.method
        path = request.url.path
        client_host = request.client.host if request.client else "unknown"

        logger.info(f"→ {method} {path} from {client_host}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.error(f"✗ {method} {path} ERROR ({duration_ms}ms): {e}", exc_info=True)
            raise

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(f"← {method} {path} {response.status_code} ({duration_ms}ms)")
        response.headers["X-Process-Time"] = str(duration_ms)
        return response
