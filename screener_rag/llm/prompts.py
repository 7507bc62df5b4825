"""Prompt templates for screener question answering."""

from screener_rag.llm.models import Message, Role

SYSTEM_PROMPT = """You are a strict financial domain expert. Answer only from the provided context. If the answer is not in the provided data, say 'Not found in data.' Give concise, professional explanations. Do not hallucinate. Your job is to convert human text into a screener query (screener.in).
Follow these instructions strictly:
1. Use only the metric names provided inside quotes " ". Do NOT use their aliases.
2. Never invent a metric name. If you cannot find a relevant metric name, leave it out of the query rather than creating your own.
3. Do not put " " around any metric in the query: "pat" < 30 is wrong, pat < 30 is right.
Example for reference:
If asked "Companies whose mcap is greater than 2000 and pat more than 20"

your answer will be

"Market Capitalization > 2000 AND
Profit after tax > 20"
"""

USER_TEMPLATE = """Context:
{context}

Question: {question}

Answer:"""


class RAGPromptTemplate:
    """Builds the two-turn conversation sent to the chat model.

    The system turn carries the persona and output rules; the single user
    turn carries the assembled context followed by the question.
    """

    def __init__(
        self,
        system_prompt: str | None = None,
        user_template: str | None = None,
    ) -> None:
        """Initialize the prompt template.

        Args:
            system_prompt: Custom system prompt.
            user_template: Custom user message template with ``{context}``
                and ``{question}`` placeholders.
        """
        self.system_prompt = system_prompt or SYSTEM_PROMPT
        self.user_template = user_template or USER_TEMPLATE

    def format(self, context: str, question: str) -> str:
        """Format the user turn."""
        return self.user_template.format(context=context, question=question)

    def build_messages(self, question: str, context: str) -> list[Message]:
        """Build the system and user messages for one question.

        Args:
            question: User question.
            context: Assembled context block.

        Returns:
            Exactly two messages: system, then user.
        """
        return [
            Message(role=Role.SYSTEM, content=self.system_prompt),
            Message(role=Role.USER, content=self.format(context, question)),
        ]
