"""Tests for document, chunk and retrieval entities."""

import pytest
from pydantic import ValidationError

from portfolio_rag.entities.document import Chunk, DocumentRecord, DocumentType, IngestMetadata
from portfolio_rag.entities.search_result import ContextItem, ContextStatus, RetrievalResult, RetrievedContext


class TestDocumentType:

    def test_closed_enumeration(self):
        assert [t.value for t in DocumentType] == ["cv", "portfolio", "project", "blog", "github", "linkedin", "other"]

    @pytest.mark.parametrize("value,valid", [("cv", True), ("linkedin", True), ("CV", False), ("recipe", False)])
    def test_is_valid(self, value, valid):
        assert DocumentType.is_valid(value) is valid


class TestChunk:

    def test_defaults(self):
        chunk = Chunk(content="text", metadata={"document_id": "d1", "chunk_index": 2})

        assert chunk.id
        assert chunk.embedding is None
        assert chunk.document_id == "d1"
        assert chunk.chunk_index == 2

    def test_empty_content_rejected(self):
        with pytest.raises(ValidationError):
            Chunk(content="")

    def test_unique_ids(self):
        assert Chunk(content="a").id != Chunk(content="a").id


class TestDocumentRecord:

    def test_timestamps_are_utc(self):
        record = DocumentRecord(id="d1", title="t", type="blog", source="s")

        assert record.type is DocumentType.BLOG
        assert record.created_at.tzinfo is not None
        assert record.chunk_count == 0

    def test_negative_chunk_count_rejected(self):
        with pytest.raises(ValidationError):
            DocumentRecord(id="d1", title="t", type="blog", source="s", chunk_count=-1)


def test_ingest_metadata_defaults():
    meta = IngestMetadata(type="project")

    assert meta.document_id is None
    assert meta.title == "Untitled Document"
    assert meta.source == "manual-input"
    assert meta.tags == {}


class TestRetrievalResult:

    def test_sorts_by_descending_score(self):
        results = [RetrievalResult(content=str(s), score=s) for s in (0.2, 0.9, 0.5)]

        assert [r.score for r in sorted(results)] == [0.9, 0.5, 0.2]

    @pytest.mark.parametrize("score", [-0.1, 1.1])
    def test_score_bounds(self, score):
        with pytest.raises(ValidationError):
            RetrievalResult(content="x", score=score)


def test_retrieved_context_status():
    empty = RetrievedContext()
    found = RetrievedContext(items=[ContextItem(content="x", relevance=0.8)])

    assert empty.status is ContextStatus.NO_RELEVANT_CONTEXT
    assert not empty.found
    assert found.status is ContextStatus.FOUND
    assert found.found
