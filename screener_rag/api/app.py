"""FastAPI application entry point.

Configures the application with logging, CORS, metrics, exception handling
and health checks.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from screener_rag import __version__
from screener_rag.api.routes import ErrorResponse, router
from screener_rag.config import get_settings
from screener_rag.exceptions import (
    ErrorCode,
    ScreenerRAGError,
    ValidationError,
)
from screener_rag.logging_config import get_logger, setup_logging
from screener_rag.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)

INTERNAL_ERROR = "Internal server error"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting RAG Chat Service",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
            "index": settings.pinecone.index_name,
        },
    )

    yield

    logger.info("Shutting down RAG Chat Service")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Screener RAG Chat Service",
        description="Answers financial screener questions from a Pinecone index",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(ScreenerRAGError, rag_exception_handler)

    app.add_api_route("/", root, methods=["GET"], tags=["Health"])
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics, methods=["GET"], tags=["Observability"])
    app.include_router(router)

    return app


async def rag_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle ScreenerRAGError exceptions.

    Invalid input and a missing API key surface their own message; any
    other pipeline failure becomes a generic error with the message as details.
    """
    if not isinstance(exc, ScreenerRAGError):
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=INTERNAL_ERROR, details=str(exc)).model_dump(
                exclude_none=True
            ),
        )

    logger.error(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    if isinstance(exc, ValidationError) or exc.code == ErrorCode.API_KEY_MISSING:
        body = ErrorResponse(error=exc.message)
    else:
        body = ErrorResponse(error=INTERNAL_ERROR, details=exc.message)

    return JSONResponse(
        status_code=_get_status_code(exc.code),
        content=body.model_dump(exclude_none=True),
    )


def _get_status_code(error_code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    if error_code == ErrorCode.VALIDATION_ERROR:
        return 400

    # Configuration, upstream and malformed-response errors alike
    return 500


async def root() -> dict[str, Any]:
    """Liveness check.

    Returns:
        Service message and timestamp.
    """
    return {
        "message": "RAG Chat Service is running",
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def health_check() -> dict[str, Any]:
    """Report whether upstream credentials are configured.

    Never calls the upstream services.

    Returns:
        Health status with version, configuration checks and timestamp.
    """
    settings = get_settings()
    checks = {
        "openai": "ok" if settings.openai.is_configured else "missing",
        "pinecone": "ok" if settings.pinecone.is_configured else "missing",
    }

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": __version__,
        "checks": checks,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
