"""Context assembly from ranked matches."""

from screener_rag.retrieval.models import Match

NO_CONTEXT = "No relevant context found."
SEPARATOR = "\n\n---\n\n"
DEFAULT_CONTENT_FIELD = "document_content"


class ContextAssembler:
    """Turns ranked matches into the single text block given to the model.

    Never fails: a match without content is replaced by a placeholder naming
    its 1-based position, so one bad record cannot sink the request.
    """

    def __init__(
        self,
        content_field: str = DEFAULT_CONTENT_FIELD,
        separator: str = SEPARATOR,
        empty_context: str = NO_CONTEXT,
    ) -> None:
        self.content_field = content_field
        self.separator = separator
        self.empty_context = empty_context

    def format_match(self, match: Match, position: int) -> str:
        """Render one match, ``position`` being 1-based."""
        text = match.content(self.content_field)
        if text is None:
            text = f"Match {position} (no {self.content_field} found)"

        if match.score is not None:
            text = f"{text} (relevance: {match.score:.3f})"
        return text

    def assemble(self, matches: list[Match]) -> str:
        """Join matches in retrieval order, or return the no-context sentinel."""
        if not matches:
            return self.empty_context

        return self.separator.join(
            self.format_match(match, position)
            for position, match in enumerate(matches, start=1)
        )
