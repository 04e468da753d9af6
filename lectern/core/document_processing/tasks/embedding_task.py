"""
Embedding generation task.

Generates vector embeddings for chunks and queries through any LangChain
Embeddings backend (Gemini in production).

Dependencies: langchain_core
System role: Third stage of document ingestion pipeline, and query embedding
"""

import logging

from langchain_core.embeddings import Embeddings

from lectern.core.exceptions import EmbeddingError

from ..models import Chunk

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Generate embeddings with a fixed-dimension LangChain Embeddings backend."""

    def __init__(self, embeddings: Embeddings, dimension: int | None = None) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: LangChain embeddings backend
            dimension: Expected vector dimension; vectors of another size are rejected
        """
        self._embeddings = embeddings
        self._dimension = dimension

    def embed(self, chunks: list[Chunk]) -> list[Chunk]:
        """
        Generate embeddings for chunks in one batch.

        Args:
            chunks: Chunks to embed

        Returns:
            list[Chunk]: Copies of the chunks with embeddings set

        Raises:
            EmbeddingError: When embedding generation fails
        """
        if not chunks:
            return []

        try:
            vectors = self._embeddings.embed_documents([chunk.text for chunk in chunks])
        except Exception as e:
            raise EmbeddingError(f"Failed to generate embeddings: {e}") from e

        if len(vectors) != len(chunks):
            raise EmbeddingError(
                f"Embedding backend returned {len(vectors)} vectors for {len(chunks)} chunks"
            )
        for vector in vectors:
            self._check_dimension(vector)

        return [
            chunk.model_copy(update={"embedding": list(vector)})
            for chunk, vector in zip(chunks, vectors)
        ]

    def embed_query(self, text: str) -> list[float]:
        """
        Embed a single query string.

        Raises:
            EmbeddingError: When embedding generation fails
        """
        try:
            vector = self._embeddings.embed_query(text)
        except Exception as e:
            raise EmbeddingError(f"Failed to embed query: {e}") from e
        self._check_dimension(vector)
        return list(vector)

    def _check_dimension(self, vector: list[float]) -> None:
        if self._dimension is not None and len(vector) != self._dimension:
            raise EmbeddingError(
                f"Embedding has dimension {len(vector)}, expected {self._dimension}"
            )
