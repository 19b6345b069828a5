from abc import ABC, abstractmethod
from typing import Any

from portfolio_rag.entities.document import Chunk, DocumentRecord
from portfolio_rag.entities.search_result import RetrievalResult


class BaseVectorStore(ABC):
    """
    Abstract base class for the chunk + document metadata store.

    Two logical tables: chunk rows (content, embedding, metadata) and
    document metadata rows (id, title, type, source, timestamps, chunk_count).
    Implementations are synchronous; async callers use ``asyncio.to_thread``.
    """

    # Chunks

    @abstractmethod
    def upsert_chunks(self, chunks: list[Chunk]) -> None:
        """Insert or replace chunks by id. Never removes other chunks."""
        pass

    @abstractmethod
    def similarity_search(
        self,
        query_vector: list[float],
        k: int = 5,
        filter: dict[str, Any] | None = None,
    ) -> list[RetrievalResult]:
        """
        Return up to ``k`` chunks ordered by descending score.

        Args:
            query_vector: The embedded query
            k: Maximum number of results
            filter: Metadata constraints; every key must match
                (see ``filters.metadata_matches``)
        """
        pass

    @abstractmethod
    def delete_chunks(self, document_id: str) -> int:
        """Remove every chunk of a document. Returns how many were removed."""
        pass

    # Document metadata

    @abstractmethod
    def upsert_document(self, record: DocumentRecord) -> None:
        pass

    @abstractmethod
    def update_chunk_count(self, document_id: str, chunk_count: int) -> None:
        """Set chunk_count and bump updated_at."""
        pass

    @abstractmethod
    def get_document(self, document_id: str) -> DocumentRecord | None:
        pass

    @abstractmethod
    def list_documents(self) -> list[DocumentRecord]:
        """All documents, newest first."""
        pass

    def delete_document(self, document_id: str) -> bool:
        """
        Remove a document's chunks and its metadata row.

        Returns:
            True if the metadata row existed
        """
        self.delete_chunks(document_id)
        return self._delete_record(document_id)

    @abstractmethod
    def _delete_record(self, document_id: str) -> bool:
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
