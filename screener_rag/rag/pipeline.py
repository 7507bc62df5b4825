"""Chat pipeline orchestrator."""

import time
from datetime import UTC, datetime

import httpx

from screener_rag.config import Settings
from screener_rag.embeddings.service import EmbeddingService, OpenAIEmbeddingService
from screener_rag.exceptions import ErrorCode, ScreenerRAGError, ValidationError
from screener_rag.llm.client import GatewayChatClient
from screener_rag.llm.generator import ResponseGenerator
from screener_rag.logging_config import get_logger
from screener_rag.observability.metrics import track_chat_query
from screener_rag.rag.context import ContextAssembler
from screener_rag.rag.models import ChatResult, PipelineStage
from screener_rag.retrieval.client import PineconeRetrievalClient, RetrievalClient

logger = get_logger(__name__)

QUERY_REQUIRED = "Query is required and must be a string"


class ChatOrchestrator:
    """Runs one chat request through embed, retrieve, assemble and generate.

    Create one instance per request. ``stage`` holds the last state reached;
    on failure it becomes ``ERRORED`` and the raised error's details carry
    the state the request had reached when it failed.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        retrieval_client: RetrievalClient,
        generator: ResponseGenerator,
        assembler: ContextAssembler | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            embedding_service: Turns the query into a vector.
            retrieval_client: Finds matches for the vector.
            generator: Produces the answer from context.
            assembler: Builds the context block from matches.
        """
        self._embedding_service = embedding_service
        self._retrieval_client = retrieval_client
        self._generator = generator
        self._assembler = assembler or ContextAssembler()
        self.stage = PipelineStage.RECEIVED_QUERY

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
    ) -> "ChatOrchestrator":
        """Wire the production collaborators from configuration.

        Args:
            settings: Application settings.
            client: HTTP client shared by all three upstream calls.
        """
        return cls(
            embedding_service=OpenAIEmbeddingService(settings=settings, client=client),
            retrieval_client=PineconeRetrievalClient(settings=settings, client=client),
            generator=ResponseGenerator(
                GatewayChatClient(settings=settings, client=client)
            ),
            assembler=ContextAssembler(content_field=settings.content_field),
        )

    async def run(self, query: object) -> ChatResult:
        """Answer ``query`` from retrieved context.

        Args:
            query: Caller-supplied query; must be a non-blank string.

        Returns:
            ChatResult with the answer and the retrieval match count.

        Raises:
            ValidationError: If the query is missing, not a string or blank.
            ScreenerRAGError: Any pipeline failure; nothing is retried.
        """
        self.stage = PipelineStage.RECEIVED_QUERY
        start = time.perf_counter()

        try:
            result = await self._run(query)
        except ScreenerRAGError as e:
            self._fail(e, start)
            raise
        except Exception as e:
            error = ScreenerRAGError(
                str(e) or type(e).__name__,
                code=ErrorCode.INTERNAL_ERROR,
                details={"exception": type(e).__name__},
            )
            self._fail(error, start)
            raise error from e

        track_chat_query(time.perf_counter() - start, stage=self.stage.value)
        return result

    async def _run(self, query: object) -> ChatResult:
        if not isinstance(query, str) or not query.strip():
            raise ValidationError(QUERY_REQUIRED)

        logger.info(f"Processing query: {query}")

        embedding = await self._embedding_service.embed(query)
        self.stage = PipelineStage.EMBEDDED

        matches = await self._retrieval_client.search(embedding.embedding)
        self.stage = PipelineStage.RETRIEVED

        context = self._assembler.assemble(matches)
        self.stage = PipelineStage.ASSEMBLED

        answer = await self._generator.generate(query, context)
        self.stage = PipelineStage.GENERATED

        result = ChatResult(
            query=query,
            response=answer,
            matches=len(matches),
            timestamp=datetime.now(UTC),
        )
        self.stage = PipelineStage.RESPONDED

        logger.info(
            "Chat request completed",
            extra={"matches": result.matches, "response_length": len(answer)},
        )
        return result

    def _fail(self, error: ScreenerRAGError, start: float) -> None:
        failed_at = self.stage
        self.stage = PipelineStage.ERRORED
        error.details.setdefault("stage", failed_at.value)

        logger.error(
            f"Chat request failed: {error.message}",
            extra={"error_code": error.code.value, "stage": failed_at.value},
        )
        track_chat_query(
            time.perf_counter() - start, stage=failed_at.value, success=False
        )
