"""Middleware for URL shortener web app."""

from .request_id import RequestIDMiddleware, get_request_id
from .logging import LoggingMiddleware
from .metrics import MetricsMiddleware, metrics_endpoint

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
    "MetricsMiddleware",
    "get_request_id",
    "metrics_endpoint",
]
