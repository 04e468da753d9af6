"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits extracted text into overlapping chunks. The splitter performs the
recursive separator descent and greedy merge without dropping characters;
overlap is then stitched on explicitly so chunk i+1 always starts with the
exact last ``chunk_overlap`` characters of the emitted chunk i.

Dependencies: langchain_text_splitters, hashlib
System role: Second stage of document ingestion pipeline
"""

import hashlib
from collections.abc import Sequence

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..models import Chunk

DEFAULT_SEPARATORS = ("\n\n", "\n", " ", "")


class ChunkingTask:
    """Split text into overlapping chunks using RecursiveCharacterTextSplitter."""

    def __init__(
        self,
        chunk_size: int = 2000,
        chunk_overlap: int = 200,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum merged piece size in characters (before overlap)
            chunk_overlap: Characters copied from the end of the previous chunk
            separators: Separators tried in order, coarse to fine

        Raises:
            ValueError: When sizes are invalid
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0:
            raise ValueError("chunk_overlap cannot be negative")
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = list(separators)
        # Overlap 0 and no stripping keep the merged pieces an exact partition of the text
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=0,
            separators=self.separators,
            keep_separator=True,
            strip_whitespace=False,
            length_function=len,
        )

    def split_text(self, text: str) -> list[str]:
        """
        Split text into chunk strings with leading overlap applied.

        Args:
            text: Extracted document text

        Returns:
            list[str]: Chunk texts in order; empty for empty input
        """
        if not text:
            return []

        pieces = self._splitter.split_text(text)
        if not self.chunk_overlap:
            return pieces

        chunks = [pieces[0]]
        for piece in pieces[1:]:
            # Overlap comes from the emitted chunk, never the raw piece
            chunks.append(chunks[-1][-self.chunk_overlap:] + piece)
        return chunks

    def chunk(self, text: str, document_id: str | None = None) -> list[Chunk]:
        """
        Split text into Chunk models.

        Args:
            text: Extracted document text
            document_id: Source document id stored on each chunk

        Returns:
            list[Chunk]: Chunks with deterministic ids and sequence indexes
        """
        return [
            Chunk(
                id=self._generate_chunk_id(chunk_text, index, document_id),
                text=chunk_text,
                index=index,
                document_id=document_id,
                metadata={"chunk_index": index},
            )
            for index, chunk_text in enumerate(self.split_text(text))
        ]

    @staticmethod
    def _generate_chunk_id(text: str, index: int, document_id: str | None) -> str:
        """
        Generate deterministic chunk ID.

        Returns:
            str: SHA-256 hash of document id + index + text, first 16 hex chars
        """
        hash_input = f"{document_id or ''}:{index}:{text}"
        return hashlib.sha256(hash_input.encode()).hexdigest()[:16]
