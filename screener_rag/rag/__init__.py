"""Chat pipeline module."""

from screener_rag.rag.context import NO_CONTEXT, SEPARATOR, ContextAssembler
from screener_rag.rag.models import ChatResult, PipelineStage
from screener_rag.rag.pipeline import QUERY_REQUIRED, ChatOrchestrator

__all__ = [
    "NO_CONTEXT",
    "QUERY_REQUIRED",
    "SEPARATOR",
    "ChatOrchestrator",
    "ChatResult",
    "ContextAssembler",
    "PipelineStage",
]
