"""Observability module: structured logging, request IDs and Prometheus metrics."""

from .logging_config import configure_logging, get_request_id, set_request_id, generate_request_id
from .middleware import RequestIDMiddleware

__all__ = [
    "configure_logging",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "RequestIDMiddleware",
]
