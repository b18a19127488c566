"""FastAPI middleware for observability.

Every request gets a request ID (reused from X-Request-ID when the client sends
one) that is stored in the logging context and echoed in the response. One log
line is written per request; requests against an organization carry its id
as org_id so closure activity can be followed per organization.
"""

import logging
import re
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import generate_request_id, set_request_id

logger = logging.getLogger(__name__)

_ORG_PATH = re.compile(r"/organizations/([0-9a-fA-F-]{36})(?:/|$)")


def org_id_from_path(path: str) -> Optional[str]:
    """Organization id targeted by a request path, if any."""
    match = _ORG_PATH.search(path)
    return match.group(1) if match else None


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        path = request.url.path
        context = {"method": request.method, "path": path}
        org_id = org_id_from_path(path)
        if org_id:
            context["org_id"] = org_id

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"{request.method} {path} failed",
                exc_info=True,
                extra={**context, "duration_ms": round((time.perf_counter() - started) * 1000, 2)}
            )
            raise

        logger.info(
            f"{request.method} {path} -> {response.status_code}",
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response
