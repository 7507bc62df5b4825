"""LLM client module."""

from screener_rag.llm.client import NO_RESPONSE, GatewayChatClient, LLMClient
from screener_rag.llm.generator import ResponseGenerator
from screener_rag.llm.models import GenerationResult, Message, Role
from screener_rag.llm.prompts import SYSTEM_PROMPT, RAGPromptTemplate

__all__ = [
    "NO_RESPONSE",
    "SYSTEM_PROMPT",
    "GatewayChatClient",
    "GenerationResult",
    "LLMClient",
    "Message",
    "RAGPromptTemplate",
    "ResponseGenerator",
    "Role",
]
