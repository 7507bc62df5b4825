"""Embedding service module."""

from screener_rag.embeddings.models import EmbeddingResult
from screener_rag.embeddings.service import EmbeddingService, OpenAIEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "OpenAIEmbeddingService",
]
