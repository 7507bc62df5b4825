"""Chat pipeline data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class PipelineStage(str, Enum):
    """States of a single chat request."""

    RECEIVED_QUERY = "received_query"
    EMBEDDED = "embedded"
    RETRIEVED = "retrieved"
    ASSEMBLED = "assembled"
    GENERATED = "generated"
    RESPONDED = "responded"
    ERRORED = "errored"


class ChatResult(BaseModel):
    """Outcome of a successful chat request.

    Attributes:
        query: The caller's query, as received.
        response: Generated answer text.
        matches: Number of matches returned by the vector index.
        timestamp: When the answer was produced (UTC).
    """

    query: str = Field(description="User query")
    response: str = Field(description="Generated answer")
    matches: int = Field(ge=0, description="Matches returned by retrieval")
    timestamp: datetime = Field(description="Completion time (UTC)")
