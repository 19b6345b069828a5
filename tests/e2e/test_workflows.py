"""End-to-end workflows over the real stores with scripted external services."""

import pytest

from portfolio_rag.config.settings import Settings
from portfolio_rag.datasource.kv.sql import SQLConversationStore
from portfolio_rag.datasource.vdb.duckdb import DuckDBVectorStore
from portfolio_rag.engine import PortfolioRAG
from portfolio_rag.entities.conversation import MessageRole
from portfolio_rag.entities.search_result import ContextStatus
from portfolio_rag.pipeline.chat import ChatOptions
from portfolio_rag.pipeline.prompts import NO_CONTEXT_REPLY, STRICT_CONTEXT_GUIDELINES
from tests.utils.fakes import FakeLLM, KeywordEmbedder

BLOG_POST = "Notes on design tokens. Good design systems make frontend design consistent."


@pytest.fixture
def stack(tmp_path):
    settings = Settings(
        OPENAI_API_KEY="sk-test",
        SIMILARITY_THRESHOLD=0.3,
        CHUNK_SIZE=300,
        CHUNK_OVERLAP=30,
    )
    llm = FakeLLM(reply="I have been building with React for years.")
    conversations = SQLConversationStore(f"sqlite:///{tmp_path / 'conversations.db'}")
    engine = PortfolioRAG(
        settings=settings,
        vector_store=DuckDBVectorStore(str(tmp_path / "rag.duckdb")),
        embedder=KeywordEmbedder(),
        llm=llm,
        conversation_store=conversations,
    )
    return engine, llm, conversations


@pytest.mark.asyncio
async def test_ingest_retrieve_chat_delete(stack, sample_cv):
    engine, llm, conversations = stack

    cv_result = await engine.ingest_cv(sample_cv)
    blog_result = await engine.ingest(BLOG_POST, {"document_id": "blog-1", "title": "Design notes", "type": "blog"})
    assert cv_result.success and blog_result.success
    assert cv_result.chunk_count > 1

    documents = await engine.list_documents()
    assert {d.id for d in documents} == {"cv-main", "blog-1"}
    assert next(d for d in documents if d.id == "cv-main").chunk_count == cv_result.chunk_count

    context = await engine.retrieve_context("React developer")
    assert context.status is ContextStatus.FOUND
    assert context.items[0].title == "Alison Galindo CV"
    assert all(item.title != "Design notes" for item in context.items)
    relevances = [item.relevance for item in context.items]
    assert relevances == sorted(relevances, reverse=True)

    response = await engine.chat("Are you a React developer?", options=ChatOptions(require_context=True))
    assert response.message == "I have been building with React for years."
    system = llm.chat_calls[0]["messages"][0]["content"]
    assert system.startswith("You are an AI assistant representing Alison Galindo")
    assert "Title: Alison Galindo CV" in system
    assert system.endswith(STRICT_CONTEXT_GUIDELINES)
    history = conversations.get_history(response.conversation_id)
    assert [m.role for m in history] == [MessageRole.USER, MessageRole.ASSISTANT]

    assert await engine.delete_document("blog-1") is True
    assert [d.id for d in await engine.list_documents()] == ["cv-main"]

    await engine.aclose()


@pytest.mark.asyncio
async def test_off_topic_question_gets_canned_reply(stack, sample_cv):
    engine, llm, _ = stack
    await engine.ingest_cv(sample_cv)

    response = await engine.chat("What about cooking?", options=ChatOptions(require_context=True))

    assert response.message == NO_CONTEXT_REPLY
    assert llm.chat_calls == []
    await engine.aclose()


@pytest.mark.asyncio
async def test_reingesting_cv_converges(stack, sample_cv):
    engine, _, _ = stack

    first = await engine.ingest_cv(sample_cv)
    second = await engine.ingest_cv(sample_cv)

    assert first.chunk_count == second.chunk_count
    assert engine.vector_store.count_chunks("cv-main") == second.chunk_count
    assert len(await engine.list_documents()) == 1
    await engine.aclose()


@pytest.mark.asyncio
async def test_entity_filter_narrows_then_falls_back(stack, sample_cv):
    engine, llm, _ = stack
    await engine.ingest_cv(sample_cv)
    await engine.ingest(BLOG_POST, {"document_id": "blog-1", "type": "blog", "tags": {"technologies": ["Figma"]}})

    llm.entities = {"technologies": ["Figma"]}
    narrowed = await engine.retrieve_context("design frontend", use_entity_filter=True)
    assert narrowed.filter == {"technologies": ["Figma"]}
    assert {item.title for item in narrowed.items} == {"Untitled Document"}

    llm.entities = {"technologies": ["Rust"]}
    fallback = await engine.retrieve_context("React developer", use_entity_filter=True)
    assert fallback.found
    assert fallback.items[0].title == "Alison Galindo CV"
    await engine.aclose()
