"""Workspace Backend - FastAPI application

Serves the organization closure API under /api/v1 plus the operational
endpoints (/health, /metrics). Scheduled archive maintenance runs in Celery,
see celery_app.py.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router
from closure.router import router as closure_router

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Workspace API starting ({settings.ENVIRONMENT}), "
        f"archive retention {settings.CLOSURE_RETENTION_DAYS} days"
    )
    yield
    logger.info("Workspace API stopped")


_docs_enabled = settings.ENVIRONMENT != "production"

app = FastAPI(
    title="Workspace API",
    description="Organization closure: preview, archive and purge",
    version="0.1.0",
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    openapi_url="/openapi.json" if _docs_enabled else None,
    lifespan=lifespan,
)


# Middleware: the request ID is assigned before anything else logs
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return field-level details for malformed closure requests."""
    logger.warning(
        f"Rejected invalid request to {request.url.path}",
        extra={"errors": exc.errors()}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "validation_error", "details": exc.errors()},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log database failures in full, answer with a generic message."""
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "database_error", "message": "A database error occurred"},
    )


app.include_router(observability_router)
app.include_router(closure_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root():
    return {"name": "Workspace API", "version": app.version}
