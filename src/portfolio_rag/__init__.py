"""
portfolio_rag: document ingestion and retrieval pipeline for a portfolio
chat assistant.
"""

from .config import Settings, load_settings
from .engine import PortfolioRAG
from .entities import (
    Chunk,
    ContextItem,
    CVData,
    DocumentRecord,
    DocumentType,
    IngestMetadata,
    Message,
    MessageRole,
    QueryEntities,
    RetrievalResult,
    RetrievedContext,
)
from .errors import PortfolioRAGError
from .pipeline import ChatOptions, ChatOrchestrator, ChatResponse, IngestionPipeline, IngestionResult
from .retrieval import EntityExtractor, Retriever

__version__ = "0.1.0"

__all__ = [
    "CVData",
    "ChatOptions",
    "ChatOrchestrator",
    "ChatResponse",
    "Chunk",
    "ContextItem",
    "DocumentRecord",
    "DocumentType",
    "EntityExtractor",
    "IngestMetadata",
    "IngestionPipeline",
    "IngestionResult",
    "Message",
    "MessageRole",
    "PortfolioRAG",
    "PortfolioRAGError",
    "QueryEntities",
    "RetrievalResult",
    "RetrievedContext",
    "Retriever",
    "Settings",
    "load_settings",
]
