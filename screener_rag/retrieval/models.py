"""Retrieval data models."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Match(BaseModel):
    """A single vector index match.

    The index payload is trusted loosely: a missing id, an unusable score or
    non-mapping metadata leaves that field unset instead of failing the
    request.

    Attributes:
        id: Record identifier, if reported.
        score: Similarity score (higher is more similar), if reported.
        metadata: Stored metadata, if requested and present.
    """

    id: str | None = Field(default=None, description="Record identifier")
    score: float | None = Field(default=None, description="Similarity score")
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Record metadata",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @field_validator("score", mode="before")
    @classmethod
    def _drop_invalid_score(cls, value: Any) -> float | None:
        if isinstance(value, bool) or not isinstance(value, int | float):
            return None
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _drop_invalid_metadata(cls, value: Any) -> dict[str, Any] | None:
        return value if isinstance(value, dict) else None

    def content(self, field: str) -> str | None:
        """Return the text stored under ``field``, or None when absent.

        Empty strings and non-string values count as absent.
        """
        if not self.metadata:
            return None
        value = self.metadata.get(field)
        if isinstance(value, str) and value:
            return value
        return None
