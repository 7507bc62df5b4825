"""Answer generation from a question and its assembled context."""

from screener_rag.llm.client import LLMClient
from screener_rag.llm.prompts import RAGPromptTemplate
from screener_rag.logging_config import get_logger

logger = get_logger(__name__)


class ResponseGenerator:
    """Asks the chat model to answer a question from supplied context only."""

    def __init__(
        self,
        llm_client: LLMClient,
        prompt_template: RAGPromptTemplate | None = None,
    ) -> None:
        self._llm_client = llm_client
        self._prompt_template = prompt_template or RAGPromptTemplate()

    @property
    def model_name(self) -> str:
        return self._llm_client.model_name

    async def generate(self, query: str, context: str) -> str:
        """Return the model's answer text.

        Decoding settings (temperature, max tokens) come from configuration
        so identical (context, query) pairs produce the same request.
        """
        messages = self._prompt_template.build_messages(
            question=query, context=context
        )

        logger.info(
            "Generating response",
            extra={"model": self.model_name, "context_length": len(context)},
        )
        result = await self._llm_client.generate(messages)

        logger.debug(
            "Response generated",
            extra={
                "tokens_used": result.total_tokens,
                "answer_length": len(result.content),
            },
        )
        return result.content
