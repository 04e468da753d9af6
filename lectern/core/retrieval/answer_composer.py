"""
Answer composer.

Formats retrieved chunks into the tutor prompt and asks the chat model for
an answer. Empty context is not an error: the model is told to answer from
general knowledge and say so.

Dependencies: langchain_core, langchain_google_genai
System role: Generation stage of query answering
"""

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI

from lectern.configs.generation import GenerationSettings
from lectern.core.exceptions import GenerationError

from .answer_prompt import ANSWER_PROMPT, NO_CONTEXT_NOTICE
from .models import ComposedAnswer, RetrievedChunk

logger = logging.getLogger(__name__)


def build_chat_model(settings: GenerationSettings, model_id: str | None = None) -> ChatGoogleGenerativeAI:
    """
    Build the Gemini chat model from generation settings.

    Args:
        settings: Sampling configuration
        model_id: Override for the configured model id

    Returns:
        ChatGoogleGenerativeAI: Configured chat model
    """
    return ChatGoogleGenerativeAI(
        model=model_id or settings.model_id,
        temperature=settings.temperature,
        top_p=settings.top_p,
        max_output_tokens=settings.max_output_tokens,
    )


def format_context(chunks: list[RetrievedChunk]) -> str:
    """Join chunk texts with blank lines; a notice replaces empty context."""
    if not chunks:
        return NO_CONTEXT_NOTICE
    return "\n\n".join(chunk.text for chunk in chunks)


class AnswerComposer:
    """Generate a tutoring answer grounded in retrieved chunks."""

    def __init__(self, model: BaseChatModel) -> None:
        self._chain = ANSWER_PROMPT | model | StrOutputParser()

    async def compose(self, query: str, chunks: list[RetrievedChunk]) -> ComposedAnswer:
        """
        Compose an answer.

        Args:
            query: The student's question
            chunks: Retrieved chunks, best first (may be empty)

        Returns:
            ComposedAnswer: Answer text and top relevance score

        Raises:
            GenerationError: When the model call fails
        """
        relevance_score = chunks[0].score if chunks else 0.0
        try:
            answer = await self._chain.ainvoke({
                "question": query,
                "context": format_context(chunks),
            })
        except Exception as e:
            logger.exception(
                f"{__name__}:compose - Generation failed",
                extra={"chunk_count": len(chunks), "error": str(e)},
            )
            raise GenerationError(f"Answer generation failed: {e}") from e

        logger.info(
            f"{__name__}:compose - Answer generated",
            extra={"chunk_count": len(chunks), "relevance_score": relevance_score},
        )
        return ComposedAnswer(answer=answer, relevance_score=relevance_score)
