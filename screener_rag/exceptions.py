"""Application exception hierarchy.

All custom exceptions inherit from ScreenerRAGError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "RAG-1000"
    CONFIGURATION_ERROR = "RAG-1001"
    VALIDATION_ERROR = "RAG-1002"
    MALFORMED_RESPONSE = "RAG-1003"
    API_KEY_MISSING = "RAG-1004"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "RAG-3000"
    EMBEDDING_DIMENSION_MISMATCH = "RAG-3001"

    # Vector index errors (4xxx)
    VECTOR_INDEX_ERROR = "RAG-4000"

    # LLM errors (5xxx)
    LLM_SERVICE_ERROR = "RAG-5000"
    LLM_TIMEOUT = "RAG-5001"
    LLM_RATE_LIMIT = "RAG-5002"


class ScreenerRAGError(Exception):
    """Base exception for all service errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logs."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ScreenerRAGError):
    """Missing or inconsistent operational configuration."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ValidationError(ScreenerRAGError):
    """Caller input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class UpstreamError(ScreenerRAGError):
    """Non-success response or transport failure from an upstream service.

    Attributes:
        service: Upstream service name ("openai", "pinecone", "gateway").
        status_code: Upstream HTTP status, or None for transport failures.
    """

    def __init__(
        self,
        message: str,
        service: str,
        status_code: int | None = None,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        merged = {"service": service, "status_code": status_code}
        merged.update(details or {})
        super().__init__(message, code, merged)


class MalformedResponseError(ScreenerRAGError):
    """Upstream succeeded but the payload lacks expected fields."""

    def __init__(
        self,
        message: str,
        service: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.service = service
        merged = {"service": service}
        merged.update(details or {})
        super().__init__(message, ErrorCode.MALFORMED_RESPONSE, merged)
