from .kv import BaseConversationStore, InMemoryConversationStore, SQLConversationStore
from .vdb import BaseVectorStore, DuckDBVectorStore

__all__ = [
    "BaseConversationStore",
    "BaseVectorStore",
    "DuckDBVectorStore",
    "InMemoryConversationStore",
    "SQLConversationStore",
]
