"""Retrieval client interface and Pinecone implementation."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from screener_rag.config import Settings, get_settings
from screener_rag.exceptions import (
    ConfigurationError,
    ErrorCode,
    MalformedResponseError,
    UpstreamError,
    ValidationError,
)
from screener_rag.logging_config import get_logger
from screener_rag.observability.metrics import track_retrieval_request
from screener_rag.retrieval.models import Match

logger = get_logger(__name__)


class RetrievalClient(ABC):
    """Abstract base class for vector index clients."""

    @abstractmethod
    async def search(self, embedding: list[float]) -> list[Match]:
        """Find the records nearest to ``embedding``.

        Args:
            embedding: Query vector.

        Returns:
            Matches in the order the index ranked them (best first).
            An empty list means nothing relevant was found.

        Raises:
            ValidationError: If the embedding is empty.
            ConfigurationError: If connection settings are missing.
            UpstreamError: On non-success status or transport failure.
            MalformedResponseError: If the response cannot be parsed.
        """
        ...


class PineconeRetrievalClient(RetrievalClient):
    """Queries a Pinecone index through its data-plane REST API."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Pinecone client.

        Args:
            settings: Application settings. Uses cached settings if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        settings = settings or get_settings()
        self._settings = settings.pinecone
        self._top_k = settings.top_k
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
    def top_k(self) -> int:
        """Maximum number of matches requested per query."""
        return self._top_k

    def _check_configuration(self) -> tuple[str, str]:
        """Return (api_key, index_host) or raise if anything is missing."""
        api_key = (
            self._settings.api_key.get_secret_value() if self._settings.api_key else ""
        )
        if not api_key:
            raise ConfigurationError("PINECONE_API_KEY is not configured")
        if not self._settings.index_host:
            raise ConfigurationError("PINECONE_INDEX_HOST is not configured")
        if not self._settings.index_name:
            raise ConfigurationError("PINECONE_INDEX_NAME is not configured")
        return api_key, self._settings.index_host

    async def search(self, embedding: list[float]) -> list[Match]:
        """Query the index with ``embedding``."""
        if not embedding:
            raise ValidationError("Embedding is required for retrieval")

        api_key, index_host = self._check_configuration()

        client = await self._get_client()
        url = f"{index_host.rstrip('/')}/query"
        payload = {
            "vector": embedding,
            "topK": self._top_k,
            "includeMetadata": True,
            "includeValues": False,
        }

        logger.info(
            f"Searching Pinecone index: {self._settings.index_name}",
            extra={"top_k": self._top_k, "dimensions": len(embedding)},
        )

        start = time.perf_counter()
        try:
            response = await client.post(
                url,
                json=payload,
                headers={"Api-Key": api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            track_retrieval_request(time.perf_counter() - start, 0, None, success=False)
            status = e.response.status_code
            logger.error(
                f"Pinecone API error: {status}",
                extra={"url": url, "status": status},
            )
            raise UpstreamError(
                f"Pinecone search failed: {status} - {e.response.text}",
                service="pinecone",
                status_code=status,
                code=ErrorCode.VECTOR_INDEX_ERROR,
            ) from e
        except httpx.RequestError as e:
            track_retrieval_request(time.perf_counter() - start, 0, None, success=False)
            logger.error(f"Pinecone connection error: {e}", extra={"url": url})
            raise UpstreamError(
                f"Pinecone search failed: {e}",
                service="pinecone",
                code=ErrorCode.VECTOR_INDEX_ERROR,
            ) from e

        try:
            matches = _parse_matches(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise MalformedResponseError(
                "Invalid query response from Pinecone",
                service="pinecone",
                details={"error": str(e)},
            ) from e

        top_score = matches[0].score if matches else None
        track_retrieval_request(time.perf_counter() - start, len(matches), top_score)
        logger.info(f"Pinecone search completed. Found {len(matches)} matches")

        return matches


def _parse_matches(data: Any) -> list[Match]:
    """Convert a ``/query`` response body into matches, preserving order."""
    if not isinstance(data, dict):
        raise ValueError("response body is not an object")

    raw_matches = data.get("matches")
    if raw_matches is None:
        return []
    if not isinstance(raw_matches, list):
        raise ValueError("matches is not a list")

    # Every entry counts toward the match total, even one with no usable fields
    return [
        Match.model_validate(raw) if isinstance(raw, dict) else Match()
        for raw in raw_matches
    ]
