"""Prometheus request metrics."""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable


METRICS_PATH = "/metrics"

REQUESTS_TOTAL = Counter(
    "shortlink_requests_total",
    "Total number of requests processed by the shortlink web server",
    ["path", "status"],
)

REQUEST_ERRORS_TOTAL = Counter(
    "shortlink_requests_errors_total",
    "Total number of error requests processed by the shortlink web server",
    ["path", "status"],
)


def route_template(request: Request) -> str:
    """Matched route path (``/{code}``), so labels stay bounded per route."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count every request by route and status; >= 400 also counts as an error.

    Scrapes of the metrics endpoint itself are not counted.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)

        if request.url.path == METRICS_PATH:
            return response

        path = route_template(request)
        status = str(response.status_code)
        REQUESTS_TOTAL.labels(path=path, status=status).inc()
        if response.status_code >= 400:
            REQUEST_ERRORS_TOTAL.labels(path=path, status=status).inc()

        return response


async def metrics_endpoint() -> Response:
    """Prometheus text exposition of the default registry."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
