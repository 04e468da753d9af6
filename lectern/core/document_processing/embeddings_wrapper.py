"""
Embedding backends.

FixedDimensionEmbeddings wraps GoogleGenerativeAIEmbeddings so every call
uses the configured output dimensionality (the base class ignores it in the
constructor). build_embeddings picks the backend from settings; the 'fake'
provider gives deterministic vectors for offline development.

Dependencies: langchain_google_genai, langchain_core
System role: Embedding dimension consistency with the vector collection
"""

import logging
from typing import List

from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings wrapper with fixed output dimensionality.

    All embed calls use the configured dimension unless the caller passes
    one explicitly, so vectors always match the collection schema.
    """

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/text-embedding-004",
        output_dimensionality: int = 768,
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Fixed dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(
        self,
        texts: List[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: List[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> List[List[float]]:
        """
        Embed chunk texts at the configured dimension.

        Args:
            texts: Chunk texts to embed
            batch_size: Texts per API request
            task_type: Optional Gemini task type
            titles: Optional per-text titles
            output_dimensionality: Explicit dimension; the configured one when None

        Returns:
            List of vectors, one per text
        """
        dim = output_dimensionality or self._output_dimensionality
        return super().embed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type,
            titles=titles,
            output_dimensionality=dim,
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        """Embed a query at the configured dimension unless one is passed explicitly."""
        dim = output_dimensionality or self._output_dimensionality
        return super().embed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=dim,
        )


def build_embeddings(provider: str, model: str, dimension: int) -> Embeddings:
    """
    Build the configured embedding backend.

    Args:
        provider: 'google' or 'fake'
        model: Embedding model ID (google only)
        dimension: Output vector dimension

    Returns:
        Embeddings: LangChain embeddings instance

    Raises:
        ValueError: If provider is unknown
    """
    provider = provider.lower()
    if provider == "google":
        return FixedDimensionEmbeddings(model=model, output_dimensionality=dimension)
    if provider == "fake":
        logger.warning(f"{__name__}:build_embeddings - Using deterministic fake embeddings")
        return DeterministicFakeEmbedding(size=dimension)
    raise ValueError(f"Invalid embedding provider: {provider}. Use 'google' or 'fake'.")
