"""Observability module for metrics and monitoring."""

from screener_rag.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    track_chat_query,
    track_embedding_request,
    track_llm_request,
    track_retrieval_request,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "track_chat_query",
    "track_embedding_request",
    "track_llm_request",
    "track_retrieval_request",
]
