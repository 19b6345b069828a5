"""
Composition root.

``PortfolioRAG`` builds every component from settings (or takes injected
ones) and owns their lifecycle. Nothing in the package keeps a
module-level client.

Example:
    engine = PortfolioRAG.from_settings(settings)
    result = await engine.ingest("I build React apps...", {"type": "portfolio"})
    reply = await engine.chat("What do you work with?")
    await engine.aclose()
"""

from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from portfolio_rag.config.settings import Settings
from portfolio_rag.datasource.kv.base import BaseConversationStore
from portfolio_rag.datasource.kv.sql import SQLConversationStore
from portfolio_rag.datasource.vdb.base import BaseVectorStore
from portfolio_rag.datasource.vdb.duckdb import DuckDBVectorStore
from portfolio_rag.entities.conversation import Message
from portfolio_rag.entities.cv import CVData
from portfolio_rag.entities.document import DocumentRecord, IngestMetadata
from portfolio_rag.entities.search_result import RetrievedContext
from portfolio_rag.errors import ConfigurationError
from portfolio_rag.index_processor.splitter.recursive_character import RecursiveCharacterChunker
from portfolio_rag.llm.base import BaseLLM
from portfolio_rag.llm.config import TimeoutConfig
from portfolio_rag.llm.embedder.base import BaseEmbedder
from portfolio_rag.llm.embedder.openai import OpenAIEmbedder
from portfolio_rag.llm.providers.openai import OpenAILLM
from portfolio_rag.pipeline import prompts
from portfolio_rag.pipeline.chat import ChatOptions, ChatOrchestrator, ChatResponse
from portfolio_rag.pipeline.ingestion import IngestionPipeline, IngestionResult
from portfolio_rag.retrieval.entity_extractor import EntityExtractor
from portfolio_rag.retrieval.retriever import Retriever
from portfolio_rag.utils.retry import RetryConfig


class PortfolioRAG:
    """Wires the chunker, embedder, stores, retriever and orchestrators together."""

    def __init__(
        self,
        settings: Settings,
        vector_store: BaseVectorStore,
        embedder: BaseEmbedder,
        llm: BaseLLM,
        conversation_store: BaseConversationStore | None = None,
    ):
        self.settings = settings
        self.vector_store = vector_store
        self.embedder = embedder
        self.llm = llm
        self.conversation_store = conversation_store

        self.chunker = RecursiveCharacterChunker(
            chunk_size=settings.CHUNK_SIZE,
            chunk_overlap=settings.CHUNK_OVERLAP,
        )
        self.ingestion = IngestionPipeline(vector_store, embedder, self.chunker)
        self.entity_extractor = EntityExtractor(llm)
        self.retriever = Retriever(
            embedder,
            vector_store,
            entity_extractor=self.entity_extractor,
            default_threshold=settings.SIMILARITY_THRESHOLD,
            default_limit=settings.RETRIEVAL_COUNT,
        )
        self.orchestrator = ChatOrchestrator(
            llm,
            retriever=self.retriever,
            conversation_store=conversation_store,
            persona=prompts.persona_prompt(
                settings.PERSONA_NAME,
                settings.PERSONA_TITLE,
                settings.PERSONA_LOCATION,
            ),
            max_context_chars=settings.MAX_CONTEXT_CHARS,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PortfolioRAG":
        """Build the production stack: OpenAI-compatible services, DuckDB, SQL history."""
        if not settings.OPENAI_API_KEY:
            raise ConfigurationError("OPENAI_API_KEY is required to build the default engine")

        timeout = TimeoutConfig.from_settings(settings)
        embedder = OpenAIEmbedder(
            base_url=settings.OPENAI_BASE_URL,
            api_key=settings.OPENAI_API_KEY,
            model=settings.EMBEDDING_MODEL,
            dimension=settings.EMBEDDING_DIMENSION,
            batch_size=settings.EMBEDDING_BATCH_SIZE,
            timeout=timeout,
            retry_config=RetryConfig(max_attempts=settings.EMBEDDING_MAX_ATTEMPTS),
        )
        client = AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            timeout=timeout.to_httpx(),
        )
        logger.info(
            f"Building engine: embeddings={settings.EMBEDDING_MODEL}, "
            f"completions={settings.COMPLETION_MODEL}, store={settings.DUCKDB_PATH}"
        )
        return cls(
            settings=settings,
            vector_store=DuckDBVectorStore(settings.DUCKDB_PATH),
            embedder=embedder,
            llm=OpenAILLM(client, model=settings.COMPLETION_MODEL),
            conversation_store=SQLConversationStore(settings.DATABASE_URL),
        )

    # Write path

    async def ingest(self, text: str, metadata: IngestMetadata | dict[str, Any]) -> IngestionResult:
        return await self.ingestion.ingest(text, metadata)

    async def ingest_cv(self, cv_data: CVData | dict[str, Any]) -> IngestionResult:
        return await self.ingestion.ingest_cv(cv_data)

    async def delete_document(self, document_id: str) -> bool:
        return await self.ingestion.delete(document_id)

    async def list_documents(self) -> list[DocumentRecord]:
        return await self.ingestion.list_documents()

    # Read path

    async def retrieve_context(self, query: str, limit: int | None = None, use_entity_filter: bool = False) -> RetrievedContext:
        return await self.retriever.retrieve_context(query, limit=limit, use_entity_filter=use_entity_filter)

    async def chat(
        self,
        message: str,
        history: list[Message] | None = None,
        options: ChatOptions | None = None,
    ) -> ChatResponse:
        return await self.orchestrator.respond(message, history, options)

    async def aclose(self) -> None:
        """Release every owned resource; safe to call more than once."""
        close_llm = getattr(self.llm, "close", None)
        if close_llm is not None:
            await close_llm()
        self.embedder.close()
        self.vector_store.close()
        if self.conversation_store is not None:
            self.conversation_store.close()
