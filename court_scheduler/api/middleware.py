"""
FastAPI middleware for request logging.

Tags each request with a short id and logs method, path, status and timing.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable for request ID (available across async calls)
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger(__name__)


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_ctx.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and adds an X-Request-ID response header.

    An incoming X-Request-ID is reused so calls can be traced across services.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_ctx.set(req_id)

        owner = request.headers.get("X-Owner-ID", "-")
        logger.info(
            f"[{req_id}] {request.method} {request.url.path} owner={owner}",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "query": str(request.query_params),
            },
        )

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.perf_counter() - start_time
            logger.error(
                f"[{req_id}] Request failed after {elapsed:.3f}s: {e}",
                extra={"request_id": req_id, "elapsed_ms": elapsed * 1000},
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - start_time

        logger.info(
            f"[{req_id}] {response.status_code} in {elapsed:.3f}s",
            extra={
                "request_id": req_id,
                "status_code": response.status_code,
                "elapsed_ms": elapsed * 1000,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
