"""Vector index retrieval module."""

from screener_rag.retrieval.client import PineconeRetrievalClient, RetrievalClient
from screener_rag.retrieval.models import Match

__all__ = [
    "Match",
    "PineconeRetrievalClient",
    "RetrievalClient",
]
