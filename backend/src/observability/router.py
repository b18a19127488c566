"""Observability API endpoints: Prometheus metrics and health check."""

import logging
import time

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Observability"])


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    include_in_schema=False,  # Hide from OpenAPI docs
)
def metrics():
    """Expose Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get(
    "/health",
    summary="Health check endpoint",
    description="Returns database connectivity status",
)
def health_check(db: Session = Depends(get_db)):
    """Return 200 when the database answers, 503 otherwise."""
    try:
        start = time.time()
        db.execute(text("SELECT 1"))
        latency_ms = (time.time() - start) * 1000
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return JSONResponse(
            content={"status": "unhealthy", "database": {"message": f"Database error: {str(e)}"}},
            status_code=503,
        )

    return {
        "status": "healthy",
        "database": {"message": "Database connection OK", "latency_ms": round(latency_ms, 2)},
    }
