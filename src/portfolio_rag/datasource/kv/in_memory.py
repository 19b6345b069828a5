import threading
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from portfolio_rag.datasource.kv.base import BaseConversationStore
from portfolio_rag.entities.conversation import Message, MessageRole
from portfolio_rag.entities.document import utcnow
from portfolio_rag.errors import ConversationStoreError


@dataclass
class _Conversation:
    started_at: datetime = field(default_factory=utcnow)
    last_message_at: datetime = field(default_factory=utcnow)
    messages: list[Message] = field(default_factory=list)


class InMemoryConversationStore(BaseConversationStore):
    """Process-local conversation store, used by the demo and tests."""

    def __init__(self):
        self._conversations: dict[str, _Conversation] = {}
        self._lock = threading.Lock()

    def create_conversation(self) -> str:
        conversation_id = str(uuid4())
        with self._lock:
            self._conversations[conversation_id] = _Conversation()
        return conversation_id

    def append_message(self, conversation_id: str, role: MessageRole, content: str) -> None:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                raise ConversationStoreError(
                    "Conversation not found",
                    details={"conversation_id": conversation_id},
                )
            conversation.messages.append(Message(role=role, content=content))
            conversation.last_message_at = utcnow()

    def get_history(self, conversation_id: str) -> list[Message]:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            return list(conversation.messages) if conversation else []

    def last_message_at(self, conversation_id: str) -> datetime | None:
        conversation = self._conversations.get(conversation_id)
        return conversation.last_message_at if conversation else None
