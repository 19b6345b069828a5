"""Pytest configuration and global fixtures for portfolio_rag tests."""

from pathlib import Path

import pytest

from portfolio_rag.config.settings import Settings
from portfolio_rag.datasource.kv.in_memory import InMemoryConversationStore
from portfolio_rag.datasource.vdb.duckdb import DuckDBVectorStore
from portfolio_rag.engine import PortfolioRAG
from portfolio_rag.index_processor.splitter import RecursiveCharacterChunker
from tests.utils.fakes import FakeLLM, KeywordEmbedder
from tests.utils.in_memory_vector_store import InMemoryVectorStore


@pytest.fixture
def settings():
    return Settings(OPENAI_API_KEY="sk-test", DUCKDB_PATH=":memory:", DATABASE_URL="sqlite://")


@pytest.fixture
def recursive_chunker():
    return RecursiveCharacterChunker(chunk_size=500, chunk_overlap=50)


@pytest.fixture
def keyword_embedder():
    return KeywordEmbedder()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def in_memory_vector_store():
    return InMemoryVectorStore()


@pytest.fixture
def duckdb_store():
    store = DuckDBVectorStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def conversation_store():
    return InMemoryConversationStore()


@pytest.fixture
def engine(settings, in_memory_vector_store, keyword_embedder, fake_llm, conversation_store):
    return PortfolioRAG(
        settings=settings,
        vector_store=in_memory_vector_store,
        embedder=keyword_embedder,
        llm=fake_llm,
        conversation_store=conversation_store,
    )


@pytest.fixture
def sample_cv() -> dict:
    return {
        "personalInfo": {
            "name": "Alison Galindo",
            "title": "Senior Frontend Developer",
            "location": "Caruaru, Brazil",
            "email": "alison@example.com",
            "summary": "Frontend developer who loves React.",
        },
        "experiences": [
            {
                "title": "Frontend Developer",
                "company": "Acme",
                "start_date": "2020-01-15",
                "end_date": "2022-06-01",
                "location": "Remote",
                "description": "Built dashboards.",
                "highlights": ["Shipped the design system"],
                "technologies": ["React", "TypeScript"],
            }
        ],
        "education": [
            {
                "degree": "BSc",
                "field": "Computer Science",
                "institution": "UFPE",
                "start_date": "2014-02",
            }
        ],
        "skills": [
            {"name": "React", "category": "Frontend", "proficiency": 5, "years_experience": 6},
            {"name": "CSS", "category": "Frontend", "proficiency": 4},
            {"name": "Python", "category": "Backend", "proficiency": 3, "years_experience": 2},
        ],
        "projects": [
            {
                "name": "Portfolio Chat",
                "description": "RAG assistant.",
                "url": "https://example.com",
                "repository": "https://github.com/example/chat",
                "technologies": ["Next.js", "React"],
                "highlights": ["Streams answers"],
            }
        ],
    }


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    for item in items:
        rel_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
        elif "e2e" in rel_path.parts:
            item.add_marker(pytest.mark.e2e)
