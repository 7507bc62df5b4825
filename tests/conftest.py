"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from screener_rag.api.app import app
from screener_rag.config import (
    EmbeddingSettings,
    LLMSettings,
    OpenAISettings,
    PineconeSettings,
    Settings,
)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings pointing at fake upstream hosts.

    The embedding dimension is 3 to keep fake vectors short.
    """
    return Settings(
        openai=OpenAISettings(api_key="sk-test", base_url="http://openai.test/v1"),
        embedding=EmbeddingSettings(model="text-embedding-3-small", dimensions=3),
        pinecone=PineconeSettings(
            api_key="pc-test",
            index_host="http://index.test",
            index_name="screener",
        ),
        llm=LLMSettings(model="gpt-4o-mini", gateway_url="http://gateway.test/openai"),
        top_k=5,
    )
