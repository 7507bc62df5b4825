"""Tests for embedding service."""

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from screener_rag.config import OpenAISettings, Settings
from screener_rag.embeddings.models import EmbeddingResult
from screener_rag.embeddings.service import OpenAIEmbeddingService
from screener_rag.exceptions import (
    ConfigurationError,
    ErrorCode,
    MalformedResponseError,
    UpstreamError,
    ValidationError,
)


def _response(status_code: int, json: Any = None, text: str = "") -> httpx.Response:
    request = httpx.Request("POST", "http://openai.test/v1/embeddings")
    if json is not None:
        return httpx.Response(status_code, json=json, request=request)
    return httpx.Response(status_code, text=text, request=request)


def _mock_client(response: httpx.Response) -> AsyncMock:
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.post.return_value = response
    return mock_client


class TestEmbeddingResult:
    """Tests for EmbeddingResult model."""

    def test_valid_result(self) -> None:
        """Valid embedding result is created."""
        result = EmbeddingResult(
            text="test",
            embedding=[0.1, 0.2, 0.3],
            model="test-model",
            dimensions=3,
        )
        assert result.dimensions == 3

    def test_dimensions_mismatch(self) -> None:
        """Mismatched dimensions raise error."""
        with pytest.raises(ValueError, match="dimensions"):
            EmbeddingResult(
                text="test",
                embedding=[0.1, 0.2, 0.3],
                model="test-model",
                dimensions=5,
            )


class TestOpenAIEmbeddingService:
    """Tests for OpenAIEmbeddingService."""

    def test_model_and_dimensions(self, settings: Settings) -> None:
        """Service reports configured model and dimensions."""
        service = OpenAIEmbeddingService(settings=settings)
        assert service.model_name == "text-embedding-3-small"
        assert service.dimensions == 3

    async def test_embed(self, settings: Settings) -> None:
        """Embedding request carries model, input and dimensions."""
        mock_client = _mock_client(
            _response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3]}]})
        )

        service = OpenAIEmbeddingService(settings=settings, client=mock_client)
        result = await service.embed("market cap above 2000")

        assert result.embedding == [0.1, 0.2, 0.3]
        assert result.text == "market cap above 2000"

        call = mock_client.post.call_args
        assert call.args[0] == "http://openai.test/v1/embeddings"
        assert call.kwargs["json"] == {
            "model": "text-embedding-3-small",
            "input": "market cap above 2000",
            "dimensions": 3,
        }
        assert call.kwargs["headers"]["Authorization"] == "Bearer sk-test"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_rejected(self, settings: Settings, text: str) -> None:
        """Blank text fails before any network call."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        with pytest.raises(ValidationError):
            await service.embed(text)
        mock_client.post.assert_not_called()

    async def test_missing_api_key(self, settings: Settings) -> None:
        """Missing key fails before any network call."""
        unconfigured = settings.model_copy(
            update={"openai": OpenAISettings(api_key=None)}
        )
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        service = OpenAIEmbeddingService(settings=unconfigured, client=mock_client)

        with pytest.raises(
            ConfigurationError, match="OpenAI API key not configured"
        ) as exc_info:
            await service.embed("test")
        assert exc_info.value.code == ErrorCode.API_KEY_MISSING
        mock_client.post.assert_not_called()

    async def test_http_error(self, settings: Settings) -> None:
        """Non-success status raises UpstreamError with status and body."""
        mock_client = _mock_client(_response(401, text="invalid api key"))
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        with pytest.raises(UpstreamError) as exc_info:
            await service.embed("test")

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == ErrorCode.EMBEDDING_SERVICE_ERROR
        assert "401" in exc_info.value.message
        assert "invalid api key" in exc_info.value.message

    async def test_connection_error(self, settings: Settings) -> None:
        """Connection error raises UpstreamError without status."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.side_effect = httpx.ConnectError("Connection failed")
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        with pytest.raises(UpstreamError) as exc_info:
            await service.embed("test")

        assert exc_info.value.status_code is None
        assert exc_info.value.service == "openai"

    async def test_single_attempt(self, settings: Settings) -> None:
        """Failures are not retried."""
        mock_client = _mock_client(_response(500, text="boom"))
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        with pytest.raises(UpstreamError):
            await service.embed("test")
        assert mock_client.post.await_count == 1

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"data": []},
            {"data": [{}]},
            {"data": [{"embedding": []}]},
            {"data": [{"embedding": ["a", "b", "c"]}]},
            ["not", "an", "object"],
        ],
    )
    async def test_malformed_response(self, settings: Settings, body: Any) -> None:
        """Response without a usable vector raises MalformedResponseError."""
        mock_client = _mock_client(_response(200, json=body))
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        with pytest.raises(MalformedResponseError):
            await service.embed("test")

    async def test_non_json_response(self, settings: Settings) -> None:
        """A non-JSON success body raises MalformedResponseError."""
        mock_client = _mock_client(_response(200, text="<html>oops</html>"))
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        with pytest.raises(MalformedResponseError):
            await service.embed("test")

    async def test_dimension_mismatch(self, settings: Settings) -> None:
        """A vector of the wrong length is a configuration error."""
        mock_client = _mock_client(
            _response(200, json={"data": [{"embedding": [0.1, 0.2]}]})
        )
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        with pytest.raises(ConfigurationError) as exc_info:
            await service.embed("test")

        assert exc_info.value.code == ErrorCode.EMBEDDING_DIMENSION_MISMATCH
        assert exc_info.value.details == {"expected": 3, "actual": 2}

    async def test_close(self, settings: Settings) -> None:
        """Service closes owned client."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)
        service._owns_client = True

        await service.close()
        mock_client.aclose.assert_called_once()

    async def test_does_not_close_injected_client(self, settings: Settings) -> None:
        """An injected client is left open."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        service = OpenAIEmbeddingService(settings=settings, client=mock_client)

        await service.close()
        mock_client.aclose.assert_not_called()
