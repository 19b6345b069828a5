from .base import BaseConversationStore
from .in_memory import InMemoryConversationStore
from .sql import SQLConversationStore

__all__ = ["BaseConversationStore", "InMemoryConversationStore", "SQLConversationStore"]
