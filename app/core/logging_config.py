# File: app/core/logging_config.py

"""
Logging setup and per-request access logging.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("app.request")


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_storefront", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._storefront = True
    root.addHandler(handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, URL, status and latency for every response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "request failed method=%s url=%s request_id=%s",
                request.method, request.url, request_id,
            )
            raise

        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "response method=%s url=%s status=%s latency_ms=%s request_id=%s",
            request.method, request.url, response.status_code, latency_ms, request_id,
        )
        response.headers["X-Request-ID"] = request_id
        return response
