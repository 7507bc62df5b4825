"""Embedding service interface and OpenAI implementation."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from screener_rag.config import Settings, get_settings
from screener_rag.embeddings.models import EmbeddingResult
from screener_rag.exceptions import (
    ConfigurationError,
    ErrorCode,
    MalformedResponseError,
    UpstreamError,
    ValidationError,
)
from screener_rag.logging_config import get_logger
from screener_rag.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Defines the interface for turning query text into a vector.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            ValidationError: If text is blank.
            UpstreamError: If the service is unreachable or returns an error.
            MalformedResponseError: If the response has no vector.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...


class OpenAIEmbeddingService(EmbeddingService):
    """Embedding service backed by the OpenAI ``/embeddings`` endpoint.

    The requested dimensions are sent with every call so shortened
    ``text-embedding-3-*`` vectors line up with the index.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the embedding service.

        Args:
            settings: Application settings. Uses cached settings if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        settings = settings or get_settings()
        self._openai = settings.openai
        self._settings = settings.embedding
        self._timeout = settings.http_timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    @property
    def dimensions(self) -> int:
        """Get embedding dimensions."""
        return self._settings.dimensions

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text."""
        if not text or not text.strip():
            raise ValidationError("Text input is required for embedding generation")

        if not self._openai.is_configured:
            raise ConfigurationError(
                "OpenAI API key not configured", code=ErrorCode.API_KEY_MISSING
            )
        api_key = self._openai.api_key.get_secret_value()  # type: ignore[union-attr]

        client = await self._get_client()
        url = f"{self._openai.base_url.rstrip('/')}/embeddings"
        payload = {
            "model": self.model_name,
            "input": text,
            "dimensions": self.dimensions,
        }

        logger.info(
            f"Generating embedding with model: {self.model_name}, "
            f"dimensions: {self.dimensions}"
        )

        start = time.perf_counter()
        try:
            response = await client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            track_embedding_request(
                self.model_name, time.perf_counter() - start, success=False
            )
            status = e.response.status_code
            logger.error(
                f"OpenAI embedding API error: {status}",
                extra={"url": url, "status": status},
            )
            raise UpstreamError(
                f"OpenAI embedding failed: {status} - {e.response.text}",
                service="openai",
                status_code=status,
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
            ) from e
        except httpx.RequestError as e:
            track_embedding_request(
                self.model_name, time.perf_counter() - start, success=False
            )
            logger.error(f"Embedding request error: {e}", extra={"url": url})
            raise UpstreamError(
                f"OpenAI embedding failed: {e}",
                service="openai",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
            ) from e

        track_embedding_request(self.model_name, time.perf_counter() - start)

        try:
            embedding = _first_embedding(response.json())
            result = EmbeddingResult(
                text=text,
                embedding=embedding,
                model=self.model_name,
                dimensions=len(embedding),
            )
        except (ValueError, PydanticValidationError) as e:
            raise MalformedResponseError(
                "Invalid embedding response from OpenAI",
                service="openai",
                details={"error": str(e)},
            ) from e

        if result.dimensions != self.dimensions:
            raise ConfigurationError(
                f"Embedding has {result.dimensions} dimensions, "
                f"index expects {self.dimensions}",
                code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
                details={"expected": self.dimensions, "actual": result.dimensions},
            )

        logger.info(f"Generated embedding with {result.dimensions} dimensions")
        return result


def _first_embedding(data: Any) -> list[Any]:
    """Pull ``data[0].embedding`` out of an embeddings response body."""
    try:
        embedding = data["data"][0]["embedding"]
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError(f"missing data[0].embedding: {e!r}") from e

    if not isinstance(embedding, list) or not embedding:
        raise ValueError("embedding is empty or not a list")
    return embedding
