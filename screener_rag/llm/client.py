"""LLM client interface and gateway implementation."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from screener_rag.config import Settings, get_settings
from screener_rag.exceptions import (
    ConfigurationError,
    ErrorCode,
    MalformedResponseError,
    UpstreamError,
)
from screener_rag.llm.models import GenerationResult, Message
from screener_rag.logging_config import get_logger
from screener_rag.observability.metrics import track_llm_request

logger = get_logger(__name__)

NO_RESPONSE = "No response generated"


class LLMClient(ABC):
    """Abstract base class for LLM clients.

    Defines the interface for generating text with LLMs.
    """

    @abstractmethod
    async def generate(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationResult:
        """Generate text from messages.

        Args:
            messages: Conversation messages.
            temperature: Sampling temperature override.
            max_tokens: Maximum tokens override.

        Returns:
            GenerationResult with generated text.

        Raises:
            UpstreamError: If the service rejects the request or is unreachable.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...


class GatewayChatClient(LLMClient):
    """Chat-completions client that talks to an OpenAI-compatible gateway.

    Works with:
    - Cloudflare AI Gateway (``.../openai``)
    - OpenAI API directly
    - Any OpenAI-compatible endpoint
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway client.

        Args:
            settings: Application settings. Uses cached settings if not provided.
            client: HTTP client (for testing).
        """
        settings = settings or get_settings()
        self._openai = settings.openai
        self._settings = settings.llm
        self._timeout = settings.http_timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    def _track_failure(self, start: float) -> None:
        track_llm_request(
            self.model_name,
            time.perf_counter() - start,
            prompt_tokens=0,
            completion_tokens=0,
            success=False,
        )

    async def generate(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationResult:
        """Generate text using the chat completions API."""
        if not self._openai.is_configured:
            raise ConfigurationError(
                "OpenAI API key not configured", code=ErrorCode.API_KEY_MISSING
            )
        api_key = self._openai.api_key.get_secret_value()  # type: ignore[union-attr]

        client = await self._get_client()
        url = f"{self._settings.gateway_url.rstrip('/')}/chat/completions"

        payload = {
            "model": self.model_name,
            "messages": [
                {"role": msg.role.value, "content": msg.content} for msg in messages
            ],
            "max_tokens": (
                max_tokens if max_tokens is not None else self._settings.max_tokens
            ),
            "temperature": (
                temperature if temperature is not None else self._settings.temperature
            ),
        }

        start = time.perf_counter()
        try:
            response = await client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
            )
            response.raise_for_status()

        except httpx.TimeoutException as e:
            self._track_failure(start)
            logger.error(f"LLM request timed out: {e}")
            raise UpstreamError(
                f"OpenAI chat completion timed out: {e}",
                service="gateway",
                code=ErrorCode.LLM_TIMEOUT,
            ) from e

        except httpx.HTTPStatusError as e:
            self._track_failure(start)
            status = e.response.status_code
            logger.error(f"LLM request failed: {status}", extra={"status": status})
            raise UpstreamError(
                f"OpenAI chat completion failed: {status} - {e.response.text}",
                service="gateway",
                status_code=status,
                code=(
                    ErrorCode.LLM_RATE_LIMIT
                    if status == 429
                    else ErrorCode.LLM_SERVICE_ERROR
                ),
            ) from e

        except httpx.RequestError as e:
            self._track_failure(start)
            logger.error(f"LLM connection error: {e}")
            raise UpstreamError(
                f"OpenAI chat completion failed: {e}",
                service="gateway",
                code=ErrorCode.LLM_SERVICE_ERROR,
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "Invalid chat completion response from gateway",
                service="gateway",
                details={"error": str(e)},
            ) from e
        if not isinstance(data, dict):
            raise MalformedResponseError(
                "Invalid chat completion response from gateway",
                service="gateway",
            )

        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        model = data.get("model")
        result = GenerationResult(
            content=_first_choice_content(data) or NO_RESPONSE,
            model=model if isinstance(model, str) and model else self.model_name,
            prompt_tokens=_token_count(usage, "prompt_tokens"),
            completion_tokens=_token_count(usage, "completion_tokens"),
            total_tokens=_token_count(usage, "total_tokens"),
        )

        track_llm_request(
            self.model_name,
            time.perf_counter() - start,
            result.prompt_tokens,
            result.completion_tokens,
        )
        return result


def _first_choice_content(data: dict[str, Any]) -> str | None:
    """Return ``choices[0].message.content`` if the response has one."""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    message = choice.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def _token_count(usage: dict[str, Any], key: str) -> int:
    """Read a token count from ``usage``; anything but a non-negative int is 0."""
    value = usage.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value
