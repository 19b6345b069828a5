"""Base chunker interface."""

from abc import ABC, abstractmethod
from typing import Any

from portfolio_rag.entities.document import Chunk


class BaseChunker(ABC):
    """Abstract base class for text chunking.

    Chunkers split raw document text into smaller pieces suitable
    for embedding and retrieval.
    """

    @abstractmethod
    def split_text(self, text: str) -> list[str]:
        """Split text into ordered chunks.

        Args:
            text: Raw document text

        Returns:
            Chunks in document order; empty for empty text
        """
        pass

    def split_document(self, text: str, metadata: dict[str, Any]) -> list[Chunk]:
        """Split text into Chunk entities.

        Every chunk gets a copy of ``metadata`` plus its zero-based
        ``chunk_index``, which is its position in document order.
        """
        return [
            Chunk(content=piece, metadata={**metadata, "chunk_index": index})
            for index, piece in enumerate(self.split_text(text))
        ]
