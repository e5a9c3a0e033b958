"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from .request_id import get_request_id


class LoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request on the ``shortlink.web`` logger.

    Responses with status >= 400 are logged at ERROR, the rest at INFO.
    Must sit inside RequestIDMiddleware so the request id is already set.
    """

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlink.web")

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        request_id = get_request_id(request)
        line = (
            f"request_id={request_id} {request.method} {request.url.path} "
            f"status={response.status_code} duration_ms={elapsed_ms:.2f}"
        )
        if response.status_code >= 400:
            self.logger.error(f"Request failed: {line}", extra={"request_id": request_id})
        else:
            self.logger.info(f"Request completed: {line}", extra={"request_id": request_id})

        return response
