"""Prometheus metrics for the chat service.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Chat pipeline outcomes per stage
- Embedding and LLM request latency, LLM token usage
- Retrieval match counts and scores
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Chat pipeline metrics
RAG_QUERY_DURATION = Histogram(
    "rag_query_duration_seconds",
    "Chat pipeline duration in seconds",
    ["status"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

RAG_QUERY_TOTAL = Counter(
    "rag_queries_total",
    "Total chat pipeline runs",
    ["status", "stage"],
)

# LLM Metrics
LLM_REQUEST_DURATION = Histogram(
    "llm_request_duration_seconds",
    "LLM request duration in seconds",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

LLM_TOKENS_TOTAL = Counter(
    "llm_tokens_total",
    "Total LLM tokens used",
    ["model", "type"],  # "type" label values: prompt, completion
)

LLM_REQUEST_TOTAL = Counter(
    "llm_requests_total",
    "Total LLM requests",
    ["model", "status"],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

# Retrieval Metrics
RETRIEVAL_REQUEST_DURATION = Histogram(
    "retrieval_request_duration_seconds",
    "Vector index query duration in seconds",
    ["status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0],
)

RETRIEVAL_MATCHES_RETURNED = Histogram(
    "retrieval_matches_returned",
    "Number of matches returned per query",
    buckets=[0, 1, 2, 3, 5, 10, 20, 50],
)

RETRIEVAL_TOP_SCORE = Histogram(
    "retrieval_top_score",
    "Top retrieval score per query",
    buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Collapse unknown paths to keep label cardinality bounded."""
        if path in ("/", "/chat", "/health"):
            return path
        return "other"


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_llm_request(
    model: str,
    duration: float,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool = True,
) -> None:
    """Track LLM request metrics.

    Args:
        model: LLM model name.
        duration: Request duration in seconds.
        prompt_tokens: Number of prompt tokens.
        completion_tokens: Number of completion tokens.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    LLM_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    LLM_REQUEST_TOTAL.labels(model=model, status=status).inc()

    if success:
        LLM_TOKENS_TOTAL.labels(model=model, type="prompt").inc(prompt_tokens)
        LLM_TOKENS_TOTAL.labels(model=model, type="completion").inc(completion_tokens)


def track_embedding_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        model: Embedding model name.
        duration: Request duration in seconds.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_retrieval_request(
    duration: float,
    matches_returned: int,
    top_score: float | None,
    success: bool = True,
) -> None:
    """Track vector index query metrics.

    Args:
        duration: Request duration in seconds.
        matches_returned: Number of matches returned.
        top_score: Score of the first match, if any.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    RETRIEVAL_REQUEST_DURATION.labels(status=status).observe(duration)
    if not success:
        return

    RETRIEVAL_MATCHES_RETURNED.observe(matches_returned)
    if top_score is not None and top_score > 0:
        RETRIEVAL_TOP_SCORE.observe(top_score)


def track_chat_query(duration: float, stage: str, success: bool = True) -> None:
    """Track a full pipeline run.

    Args:
        duration: Pipeline duration in seconds.
        stage: Last stage reached (the failing stage on error).
        success: Whether the run produced a result.
    """
    status = "success" if success else "error"

    RAG_QUERY_DURATION.labels(status=status).observe(duration)
    RAG_QUERY_TOTAL.labels(status=status, stage=stage).inc()
