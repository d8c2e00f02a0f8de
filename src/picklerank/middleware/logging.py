# src/picklerank/middleware/logging.py

"""Request/response logging middleware for PickleRank API."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("picklerank.api")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses.

    Each line carries a short request id (reused from an incoming
    X-Request-ID header when the gateway set one) and the acting user id.
    The request id is echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        actor_id = request.headers.get("X-User-ID", "anonymous")
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "actor_id": actor_id,
        }

        started = time.perf_counter()
        logger.info(
            "[%s] %s %s (actor=%s)",
            request_id,
            request.method,
            request.url.path,
            actor_id,
            extra=context,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.error(
                "[%s] %s %s -> ERROR (%.2fms): %s",
                request_id,
                request.method,
                request.url.path,
                duration_ms,
                e,
                extra={**context, "duration_ms": round(duration_ms, 2)},
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s %s -> %d (%.2fms)",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response  # type: ignore[no-any-return]
