from .chat import ChatOptions, ChatOrchestrator, ChatResponse, truncate_history
from .ingestion import IngestionPipeline, IngestionResult

__all__ = [
    "ChatOptions",
    "ChatOrchestrator",
    "ChatResponse",
    "IngestionPipeline",
    "IngestionResult",
    "truncate_history",
]
