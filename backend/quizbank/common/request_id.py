"""Request ID middleware: tag every request, its log records and its response."""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from quizbank.core.logging import get_logger, request_id_var

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and log the request outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        request_info = {"method": request.method, "path": request.url.path}

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                extra={**request_info, "status_code": 500, "latency_ms": _elapsed_ms(started)},
            )
            raise
        else:
            response.headers["X-Request-ID"] = request_id
            logger.info(
                "Request completed",
                extra={**request_info, "status_code": response.status_code, "latency_ms": _elapsed_ms(started)},
            )
            return response
        finally:
            request_id_var.reset(token)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
