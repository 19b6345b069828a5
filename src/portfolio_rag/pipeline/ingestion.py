"""
Ingestion Pipeline Module.

Text -> Chunk -> Embed -> Store, with per-document metadata bookkeeping.

Re-ingesting a document id replaces its chunks (delete-before-insert). A
failure after the metadata row is written is reported with the number of
chunks that reached the store; nothing is rolled back, so ingestion is
at-least-once and the caller re-runs it to converge.
"""

import asyncio
from typing import Any
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from portfolio_rag.datasource.vdb.base import BaseVectorStore
from portfolio_rag.entities.cv import CVData
from portfolio_rag.entities.document import (
    Chunk,
    DocumentRecord,
    DocumentType,
    IngestMetadata,
    utcnow,
)
from portfolio_rag.errors import (
    EmbeddingError,
    PartialIngestionError,
    PortfolioRAGError,
    ValidationError,
    VectorStoreError,
)
from portfolio_rag.index_processor.extractor.cv import CV_DOCUMENT_ID, CV_SOURCE, format_cv_as_text
from portfolio_rag.index_processor.splitter.base import BaseChunker
from portfolio_rag.llm.embedder.base import BaseEmbedder
from portfolio_rag.utils.performance import timer


class IngestionResult(BaseModel):
    """Outcome of one ingestion call; failures carry the real reason.

    Serialized with camelCase keys (``documentId``, ``chunkCount``) on the wire.
    """

    success: bool
    document_id: str | None = None
    chunk_count: int = 0
    error: str | None = None
    error_type: str | None = None
    chunks_written: int = 0

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @classmethod
    def failed(cls, error: PortfolioRAGError, document_id: str | None = None) -> "IngestionResult":
        return cls(
            success=False,
            document_id=document_id,
            error=error.message,
            error_type=type(error).__name__,
            chunks_written=getattr(error, "chunks_written", 0),
        )


class IngestionPipeline:
    """
    Orchestrates document ingestion.

    1. Validate the text and metadata (no side effects on failure)
    2. Upsert the documents_metadata row
    3. Delete chunks from a previous ingestion of the same id
    4. Chunk, embed in batches, write chunks with their sequence index
    5. Update chunk_count and updated_at
    """

    def __init__(
        self,
        vector_store: BaseVectorStore,
        embedder: BaseEmbedder,
        chunker: BaseChunker,
        write_batch_size: int = 32,
        replace_existing: bool = True,
    ):
        if write_batch_size <= 0:
            raise ValueError("write_batch_size must be positive")
        self.vector_store = vector_store
        self.embedder = embedder
        self.chunker = chunker
        self.write_batch_size = write_batch_size
        self.replace_existing = replace_existing

    async def ingest(
        self,
        text: str,
        metadata: IngestMetadata | dict[str, Any],
    ) -> IngestionResult:
        """
        Ingest one document. Never raises: errors become a failed result.

        Args:
            text: Raw document text
            metadata: document_id (generated when absent), title, type,
                source and tags copied onto every chunk
        """
        try:
            meta = self._validate(text, metadata)
        except ValidationError as e:
            logger.warning(f"[Ingestion] Rejected document: {e.message}")
            return IngestionResult.failed(e)

        document_id = meta.document_id or str(uuid4())
        logger.info(f"[Ingestion] Processing document {document_id} ({meta.type.value}, {len(text)} chars)")

        try:
            await asyncio.to_thread(self._upsert_record, document_id, meta)
        except Exception as e:
            error = e if isinstance(e, PortfolioRAGError) else VectorStoreError(str(e), original_error=e)
            logger.error(f"[Ingestion] Metadata upsert failed for {document_id}: {error}")
            return IngestionResult.failed(error, document_id)

        written = 0
        try:
            if self.replace_existing:
                removed = await asyncio.to_thread(self.vector_store.delete_chunks, document_id)
                if removed:
                    logger.debug(f"[Ingestion] Removed {removed} previous chunks of {document_id}")

            chunks = self.chunker.split_document(text, self._chunk_metadata(document_id, meta))

            with timer(f"Embedding {len(chunks)} chunks of {document_id}"):
                vectors = await asyncio.to_thread(self.embedder.embed, [c.content for c in chunks])
            if len(vectors) != len(chunks):
                raise EmbeddingError(
                    f"Expected {len(chunks)} embeddings, got {len(vectors)}",
                    details={"document_id": document_id},
                )
            for chunk, vector in zip(chunks, vectors):
                chunk.embedding = vector

            for start in range(0, len(chunks), self.write_batch_size):
                batch = chunks[start:start + self.write_batch_size]
                await asyncio.to_thread(self.vector_store.upsert_chunks, batch)
                written += len(batch)

            await asyncio.to_thread(self.vector_store.update_chunk_count, document_id, len(chunks))
        except Exception as e:
            cause = e if isinstance(e, PortfolioRAGError) else VectorStoreError(str(e), original_error=e)
            partial = PartialIngestionError(
                f"Ingestion of {document_id} stopped after {written} chunks: {cause.message}",
                document_id=document_id,
                chunks_written=written,
                original_error=cause,
            )
            logger.error(f"[Ingestion] {partial}")
            return IngestionResult.failed(partial, document_id)

        logger.info(f"[Ingestion] Stored {len(chunks)} chunks for {document_id}")
        return IngestionResult(
            success=True,
            document_id=document_id,
            chunk_count=len(chunks),
            chunks_written=written,
        )

    async def ingest_cv(self, cv_data: CVData | dict[str, Any]) -> IngestionResult:
        """Format a structured CV as text and ingest it as the ``cv-main`` document."""
        try:
            cv = cv_data if isinstance(cv_data, CVData) else CVData.model_validate(cv_data)
        except PydanticValidationError as e:
            error = ValidationError("Invalid CV data", details={"errors": e.error_count()}, original_error=e)
            return IngestionResult.failed(error)

        tags: dict[str, Any] = {}
        if technologies := cv.technologies():
            tags["technologies"] = technologies
        if skills := cv.skill_names():
            tags["skills"] = skills

        return await self.ingest(
            format_cv_as_text(cv),
            IngestMetadata(
                document_id=CV_DOCUMENT_ID,
                title=f"{cv.personal_info.name} CV",
                type=DocumentType.CV,
                source=CV_SOURCE,
                tags=tags,
            ),
        )

    async def delete(self, document_id: str) -> bool:
        """Remove a document and its chunks. Returns False for an unknown id."""
        deleted = await asyncio.to_thread(self.vector_store.delete_document, document_id)
        if deleted:
            logger.info(f"[Ingestion] Deleted document {document_id}")
        return deleted

    async def list_documents(self) -> list[DocumentRecord]:
        return await asyncio.to_thread(self.vector_store.list_documents)

    @staticmethod
    def _validate(text: str, metadata: IngestMetadata | dict[str, Any]) -> IngestMetadata:
        if not text or not text.strip():
            raise ValidationError("Document text is required")
        if isinstance(metadata, IngestMetadata):
            return metadata

        doc_type = metadata.get("type")
        if not doc_type:
            raise ValidationError("Document type is required")
        if not DocumentType.is_valid(doc_type):
            raise ValidationError(
                f"Invalid document type: {doc_type}",
                details={"allowed": [t.value for t in DocumentType]},
            )
        try:
            return IngestMetadata.model_validate({k: v for k, v in metadata.items() if v is not None})
        except PydanticValidationError as e:
            raise ValidationError("Invalid document metadata", original_error=e) from e

    def _upsert_record(self, document_id: str, meta: IngestMetadata) -> None:
        existing = self.vector_store.get_document(document_id)
        now = utcnow()
        self.vector_store.upsert_document(DocumentRecord(
            id=document_id,
            title=meta.title,
            type=meta.type,
            source=meta.source,
            created_at=existing.created_at if existing else now,
            updated_at=now,
            chunk_count=existing.chunk_count if existing else 0,
        ))

    @staticmethod
    def _chunk_metadata(document_id: str, meta: IngestMetadata) -> dict[str, Any]:
        return {
            **meta.tags,
            "document_id": document_id,
            "title": meta.title,
            "type": meta.type.value,
            "source": meta.source,
        }
