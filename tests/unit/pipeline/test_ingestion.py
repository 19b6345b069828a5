import pytest

from portfolio_rag.entities.document import DocumentType, IngestMetadata
from portfolio_rag.errors import VectorStoreError
from portfolio_rag.index_processor.splitter import RecursiveCharacterChunker
from portfolio_rag.pipeline.ingestion import IngestionPipeline
from tests.utils.fakes import KeywordEmbedder
from tests.utils.in_memory_vector_store import InMemoryVectorStore

ARTICLE = " ".join(
    f"Paragraph {i} is about React frontend work and Python backend services." for i in range(12)
)


class FlakyStore(InMemoryVectorStore):
    """Fails on the n-th chunk write."""

    def __init__(self, fail_on_call: int):
        super().__init__()
        self.fail_on_call = fail_on_call
        self.upsert_calls = 0

    def upsert_chunks(self, chunks):
        self.upsert_calls += 1
        if self.upsert_calls == self.fail_on_call:
            raise VectorStoreError("disk full")
        super().upsert_chunks(chunks)


def make_pipeline(store=None, embedder=None, **kwargs):
    return IngestionPipeline(
        vector_store=store if store is not None else InMemoryVectorStore(),
        embedder=embedder or KeywordEmbedder(),
        chunker=RecursiveCharacterChunker(chunk_size=120, chunk_overlap=20),
        **kwargs,
    )


class TestIngest:

    @pytest.mark.asyncio
    async def test_chunks_are_stored_with_metadata(self):
        pipeline = make_pipeline()

        result = await pipeline.ingest(ARTICLE, {
            "document_id": "post-1",
            "title": "My post",
            "type": "blog",
            "tags": {"technologies": ["React"]},
        })

        assert result.success
        assert result.document_id == "post-1"
        assert result.chunk_count > 1
        assert result.chunks_written == result.chunk_count

        chunks = pipeline.vector_store.chunks_for("post-1")
        assert [c.chunk_index for c in chunks] == list(range(result.chunk_count))
        assert all(c.embedding for c in chunks)
        assert chunks[0].metadata == {
            "technologies": ["React"],
            "document_id": "post-1",
            "title": "My post",
            "type": "blog",
            "source": "manual-input",
            "chunk_index": 0,
        }

        record = pipeline.vector_store.get_document("post-1")
        assert record.chunk_count == result.chunk_count
        assert record.type is DocumentType.BLOG

    @pytest.mark.asyncio
    async def test_generates_document_id(self):
        pipeline = make_pipeline()

        result = await pipeline.ingest("Short note about Python.", IngestMetadata(type=DocumentType.OTHER))

        assert result.success
        assert result.chunk_count == 1
        assert pipeline.vector_store.get_document(result.document_id).title == "Untitled Document"

    @pytest.mark.asyncio
    async def test_reingest_replaces_chunks(self):
        pipeline = make_pipeline()
        meta = {"document_id": "doc", "type": "project"}

        first = await pipeline.ingest(ARTICLE, meta)
        created_at = pipeline.vector_store.get_document("doc").created_at
        second = await pipeline.ingest("A much shorter React project description.", meta)

        assert first.chunk_count > second.chunk_count == 1
        assert len(pipeline.vector_store.chunks_for("doc")) == 1
        record = pipeline.vector_store.get_document("doc")
        assert record.chunk_count == 1
        assert record.created_at == created_at
        assert record.updated_at >= created_at

    @pytest.mark.asyncio
    async def test_other_documents_untouched(self):
        pipeline = make_pipeline()
        await pipeline.ingest("React notes.", {"document_id": "a", "type": "blog"})
        await pipeline.ingest("Python notes.", {"document_id": "b", "type": "blog"})

        await pipeline.ingest("React notes, revised.", {"document_id": "a", "type": "blog"})

        assert len(pipeline.vector_store.chunks_for("b")) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text,metadata,message", [
        ("", {"type": "blog"}, "Document text is required"),
        ("   \n", {"type": "blog"}, "Document text is required"),
        ("text", {}, "Document type is required"),
        ("text", {"type": "recipe"}, "Invalid document type: recipe"),
    ])
    async def test_validation_has_no_side_effects(self, text, metadata, message):
        embedder = KeywordEmbedder()
        pipeline = make_pipeline(embedder=embedder)

        result = await pipeline.ingest(text, metadata)

        assert not result.success
        assert result.error == message
        assert result.error_type == "ValidationError"
        assert pipeline.vector_store.records == {}
        assert embedder.calls == []

    @pytest.mark.asyncio
    async def test_partial_failure_reports_written_chunks(self):
        store = FlakyStore(fail_on_call=2)
        pipeline = make_pipeline(store=store, write_batch_size=2)

        result = await pipeline.ingest(ARTICLE, {"document_id": "doc", "type": "blog"})

        assert not result.success
        assert result.error_type == "PartialIngestionError"
        assert result.chunks_written == 2
        assert "disk full" in result.error
        assert len(store.chunks_for("doc")) == 2

    @pytest.mark.asyncio
    async def test_embedding_failure_is_reported(self):
        pipeline = make_pipeline(embedder=KeywordEmbedder(fail_after=0))

        result = await pipeline.ingest(ARTICLE, {"document_id": "doc", "type": "blog"})

        assert not result.success
        assert result.chunks_written == 0
        assert "embedding service down" in result.error
        assert pipeline.vector_store.chunks_for("doc") == []

    @pytest.mark.asyncio
    async def test_metadata_write_failure(self, mocker):
        store = InMemoryVectorStore()
        mocker.patch.object(store, "upsert_document", side_effect=VectorStoreError("locked"))

        result = await make_pipeline(store=store).ingest("text", {"type": "blog"})

        assert not result.success
        assert result.error_type == "VectorStoreError"
        assert store.chunks == {}

    @pytest.mark.asyncio
    async def test_raw_driver_error_on_metadata_write(self, mocker):
        store = InMemoryVectorStore()
        mocker.patch.object(store, "get_document", side_effect=OSError("connection reset"))

        result = await make_pipeline(store=store).ingest("text", {"document_id": "doc", "type": "blog"})

        assert not result.success
        assert result.document_id == "doc"
        assert result.error_type == "VectorStoreError"
        assert result.error == "connection reset"
        assert store.chunks == {}

    def test_invalid_write_batch_size(self):
        with pytest.raises(ValueError):
            make_pipeline(write_batch_size=0)


class TestIngestCV:

    @pytest.mark.asyncio
    async def test_cv_document_and_tags(self, sample_cv):
        pipeline = make_pipeline()

        result = await pipeline.ingest_cv(sample_cv)

        assert result.success
        assert result.document_id == "cv-main"
        record = pipeline.vector_store.get_document("cv-main")
        assert record.title == "Alison Galindo CV"
        assert record.type is DocumentType.CV
        assert record.source == "direct-input"

        chunks = pipeline.vector_store.chunks_for("cv-main")
        assert chunks[0].content.startswith("# Alison Galindo - CV")
        assert chunks[0].metadata["technologies"] == ["React", "TypeScript", "Next.js"]
        assert chunks[0].metadata["skills"] == ["React", "CSS", "Python"]

    @pytest.mark.asyncio
    async def test_reingesting_cv_keeps_single_document(self, sample_cv):
        pipeline = make_pipeline()

        await pipeline.ingest_cv(sample_cv)
        sample_cv["skills"] = sample_cv["skills"][:1]
        result = await pipeline.ingest_cv(sample_cv)

        assert [r.id for r in await pipeline.list_documents()] == ["cv-main"]
        assert len(pipeline.vector_store.chunks_for("cv-main")) == result.chunk_count

    @pytest.mark.asyncio
    async def test_invalid_cv(self):
        result = await make_pipeline().ingest_cv({"personalInfo": {"name": "No title"}})

        assert not result.success
        assert result.error_type == "ValidationError"


@pytest.mark.asyncio
async def test_delete():
    pipeline = make_pipeline()
    await pipeline.ingest("React notes.", {"document_id": "a", "type": "blog"})

    assert await pipeline.delete("a") is True
    assert pipeline.vector_store.chunks_for("a") == []
    assert await pipeline.delete("a") is False
