#!/usr/bin/env python3
"""
Portfolio RAG Demo Application

Ingests a sample CV into an in-memory DuckDB store and runs retrieval and a
chat turn against it. Runs offline: embeddings come from MockEmbedder and the
"model" echoes how much context it was given.
"""

import asyncio
import logging
import sys

from portfolio_rag import PortfolioRAG, load_settings
from portfolio_rag.datasource.kv.in_memory import InMemoryConversationStore
from portfolio_rag.datasource.vdb.duckdb import DuckDBVectorStore
from portfolio_rag.llm.base import BaseLLM
from portfolio_rag.llm.embedder.mock import MockEmbedder

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("main")


SAMPLE_CV = {
    "personalInfo": {
        "name": "Alison Galindo",
        "title": "Senior Frontend Developer",
        "location": "Caruaru, Pernambuco, Brazil",
        "github": "https://github.com/alisongalindo",
        "summary": "Frontend developer focused on React, accessibility and performance.",
    },
    "experiences": [
        {
            "title": "Senior Frontend Developer",
            "company": "Acme Labs",
            "start_date": "2021-03",
            "description": "Led the design system and the migration to Next.js.",
            "highlights": ["Cut bundle size by 40%", "Mentored four developers"],
            "technologies": ["React", "Next.js", "TypeScript"],
        }
    ],
    "skills": [
        {"name": "React", "category": "Frontend", "proficiency": 5, "years_experience": 6},
        {"name": "Python", "category": "Backend", "proficiency": 3, "years_experience": 2},
    ],
    "projects": [
        {
            "name": "Portfolio Chat",
            "description": "A retrieval-augmented assistant that answers questions about my work.",
            "technologies": ["Next.js", "OpenAI"],
        }
    ],
}


class EchoLLM(BaseLLM):
    """Stand-in model for the offline demo."""

    async def chat(self, messages, temperature=0.7, max_tokens=None, response_format=None) -> str:
        if response_format:
            return "{}"
        system = messages[0]["content"]
        documents = system.count("DOCUMENT ")
        return f"(demo) I was given {documents} context document(s) for: {messages[-1]['content']}"


async def run_demo() -> None:
    settings = load_settings().model_copy(update={"CHUNK_SIZE": 300, "CHUNK_OVERLAP": 30, "SIMILARITY_THRESHOLD": 0.0})
    engine = PortfolioRAG(
        settings=settings,
        vector_store=DuckDBVectorStore(":memory:"),
        embedder=MockEmbedder(dimension=64),
        llm=EchoLLM(),
        conversation_store=InMemoryConversationStore(),
    )

    try:
        logger.info("--- Phase 1: Indexing ---")
        result = await engine.ingest_cv(SAMPLE_CV)
        logger.info(f"Ingested {result.document_id}: success={result.success}, chunks={result.chunk_count}")

        for record in await engine.list_documents():
            logger.info(f"Document {record.id}: '{record.title}' ({record.type}), {record.chunk_count} chunks")

        logger.info("--- Phase 2: Retrieval ---")
        query = "What React experience do you have?"
        context = await engine.retrieve_context(query, limit=3)
        logger.info(f"Query '{query}': {context.status}")
        for i, item in enumerate(context.items, 1):
            preview = item.content.replace("\n", " ")[:100]
            logger.info(f"[{i}] Relevance: {item.relevance:.2f}: {preview}...")

        logger.info("--- Phase 3: Chat ---")
        reply = await engine.chat(query)
        logger.info(f"Reply: {reply.message} (conversation {reply.conversation_id})")
    finally:
        await engine.aclose()

    logger.info("Demo complete!")


def main():
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
