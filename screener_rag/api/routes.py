"""API routes for chat operations."""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from screener_rag.config import get_settings
from screener_rag.logging_config import get_logger
from screener_rag.rag.models import ChatResult
from screener_rag.rag.pipeline import ChatOrchestrator

logger = get_logger(__name__)


router = APIRouter(tags=["Chat"])


class ErrorResponse(BaseModel):
    """Error body returned for any failed request."""

    error: str = Field(description="Error summary")
    details: str | None = Field(default=None, description="Upstream error detail")


async def get_orchestrator() -> AsyncGenerator[ChatOrchestrator, None]:
    """Build a fresh orchestrator, and HTTP client, for each request."""
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield ChatOrchestrator.from_settings(settings, client=client)


async def _read_query(request: Request) -> Any:
    """Return the ``query`` member of a JSON object body, or None."""
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return body.get("query")


@router.post(
    "/chat",
    response_model=ChatResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_endpoint(
    request: Request,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatResult:
    """Answer a query from the vector index's context.

    The body is read by hand so that a non-string ``query`` maps to the
    same 400 as a missing one instead of a schema error.
    """
    query = await _read_query(request)
    return await orchestrator.run(query)
