import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

import duckdb

from portfolio_rag.datasource.vdb.base import BaseVectorStore
from portfolio_rag.datasource.vdb.filters import metadata_matches
from portfolio_rag.entities.document import Chunk, DocumentRecord, utcnow
from portfolio_rag.entities.search_result import RetrievalResult
from portfolio_rag.errors import VectorStoreError
from portfolio_rag.utils.similarity import clamp_score

logger = logging.getLogger(__name__)


class DuckDBVectorStore(BaseVectorStore):
    """
    Chunk and document metadata store on a single DuckDB database.

    Tables:
        documents: id, content, embedding FLOAT[], metadata (JSON text), document_id
        documents_metadata: id, title, type, source, created_at, updated_at, chunk_count

    Scores are cosine similarity clamped to [0, 1]. Timestamps are stored as
    ISO-8601 UTC strings so they sort lexically.

    Example:
        >>> with DuckDBVectorStore(":memory:") as store:
        ...     store.upsert_chunks(chunks)
        ...     results = store.similarity_search(vector, k=5)
    """

    def __init__(self, database_path: str = ":memory:"):
        self.database_path = database_path
        if database_path != ":memory:":
            Path(database_path).parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._closed = False
        try:
            self._connection = duckdb.connect(database_path)
            self._init_schema()
        except duckdb.Error as e:
            raise VectorStoreError(f"Failed to open DuckDB at {database_path}", original_error=e) from e
        logger.debug(f"DuckDBVectorStore initialized: {database_path}")

    def _init_schema(self) -> None:
        self._connection.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                id VARCHAR PRIMARY KEY,
                content VARCHAR NOT NULL,
                embedding FLOAT[],
                metadata VARCHAR,
                document_id VARCHAR
            )
        """)
        self._connection.execute("""
            CREATE TABLE IF NOT EXISTS documents_metadata (
                id VARCHAR PRIMARY KEY,
                title VARCHAR NOT NULL,
                type VARCHAR NOT NULL,
                source VARCHAR NOT NULL,
                created_at VARCHAR NOT NULL,
                updated_at VARCHAR NOT NULL,
                chunk_count INTEGER DEFAULT 0
            )
        """)

    def _execute(self, sql: str, params: list | None = None, many: bool = False):
        """Run a statement under the connection lock, mapping driver errors."""
        with self._lock:
            if self._closed:
                raise VectorStoreError("DuckDBVectorStore has been closed")
            try:
                if many:
                    return self._connection.executemany(sql, params)
                return self._connection.execute(sql, params or [])
            except duckdb.Error as e:
                logger.error(f"DuckDB statement failed: {e}")
                raise VectorStoreError(str(e), details={"sql": sql.split()[0]}, original_error=e) from e

    def _query(self, sql: str, params: list | None = None) -> list[tuple]:
        with self._lock:
            if self._closed:
                raise VectorStoreError("DuckDBVectorStore has been closed")
            try:
                return self._connection.execute(sql, params or []).fetchall()
            except duckdb.Error as e:
                logger.error(f"DuckDB query failed: {e}")
                raise VectorStoreError(str(e), details={"sql": sql.split()[0]}, original_error=e) from e

    # ------------------------------------------------------------------ chunks

    def upsert_chunks(self, chunks: list[Chunk]) -> None:
        if not chunks:
            return
        rows = []
        for chunk in chunks:
            if chunk.embedding is None:
                raise VectorStoreError("Chunk has no embedding", details={"chunk_id": chunk.id})
            rows.append((
                chunk.id,
                chunk.content,
                chunk.embedding,
                json.dumps(chunk.metadata),
                chunk.document_id,
            ))
        self._execute("INSERT OR REPLACE INTO documents VALUES (?, ?, ?, ?, ?)", rows, many=True)

    def similarity_search(
        self,
        query_vector: list[float],
        k: int = 5,
        filter: dict[str, Any] | None = None,
    ) -> list[RetrievalResult]:
        if not query_vector or k <= 0:
            return []

        sql = """
            SELECT content, metadata, list_cosine_similarity(embedding, ?::FLOAT[]) AS score
            FROM documents
            WHERE len(embedding) = ?
            ORDER BY score DESC NULLS LAST
        """
        params: list[Any] = [query_vector, len(query_vector)]
        if not filter:
            sql += " LIMIT ?"
            params.append(k)

        results: list[RetrievalResult] = []
        for content, meta_json, score in self._query(sql, params):
            metadata = _load_metadata(meta_json)
            if not metadata_matches(metadata, filter):
                continue
            results.append(RetrievalResult(content=content, metadata=metadata, score=clamp_score(score)))
            if len(results) >= k:
                break

        results.sort()
        return results

    def delete_chunks(self, document_id: str) -> int:
        count = self._query("SELECT count(*) FROM documents WHERE document_id = ?", [document_id])[0][0]
        self._execute("DELETE FROM documents WHERE document_id = ?", [document_id])
        return int(count)

    def count_chunks(self, document_id: str | None = None) -> int:
        if document_id is None:
            return int(self._query("SELECT count(*) FROM documents")[0][0])
        return int(self._query("SELECT count(*) FROM documents WHERE document_id = ?", [document_id])[0][0])

    # ---------------------------------------------------------------- metadata

    def upsert_document(self, record: DocumentRecord) -> None:
        self._execute(
            "INSERT OR REPLACE INTO documents_metadata VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                record.id,
                record.title,
                record.type.value,
                record.source,
                record.created_at.isoformat(),
                record.updated_at.isoformat(),
                record.chunk_count,
            ],
        )

    def update_chunk_count(self, document_id: str, chunk_count: int) -> None:
        self._execute(
            "UPDATE documents_metadata SET chunk_count = ?, updated_at = ? WHERE id = ?",
            [chunk_count, utcnow().isoformat(), document_id],
        )

    def get_document(self, document_id: str) -> DocumentRecord | None:
        rows = self._query(
            "SELECT id, title, type, source, created_at, updated_at, chunk_count "
            "FROM documents_metadata WHERE id = ?",
            [document_id],
        )
        return _row_to_record(rows[0]) if rows else None

    def list_documents(self) -> list[DocumentRecord]:
        rows = self._query(
            "SELECT id, title, type, source, created_at, updated_at, chunk_count "
            "FROM documents_metadata ORDER BY created_at DESC"
        )
        return [_row_to_record(row) for row in rows]

    def _delete_record(self, document_id: str) -> bool:
        existed = bool(self._query("SELECT 1 FROM documents_metadata WHERE id = ?", [document_id]))
        self._execute("DELETE FROM documents_metadata WHERE id = ?", [document_id])
        return existed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._connection.close()
        logger.debug(f"DuckDBVectorStore closed: {self.database_path}")


def _load_metadata(meta_json: str | None) -> dict[str, Any]:
    if not meta_json:
        return {}
    try:
        return json.loads(meta_json)
    except json.JSONDecodeError:
        logger.warning("Skipping unparseable chunk metadata")
        return {}


def _row_to_record(row: tuple) -> DocumentRecord:
    doc_id, title, doc_type, source, created_at, updated_at, chunk_count = row
    return DocumentRecord(
        id=doc_id,
        title=title,
        type=doc_type,
        source=source,
        created_at=datetime.fromisoformat(created_at),
        updated_at=datetime.fromisoformat(updated_at),
        chunk_count=chunk_count or 0,
    )
