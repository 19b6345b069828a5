from abc import ABC, abstractmethod

from portfolio_rag.entities.conversation import Message, MessageRole


class BaseConversationStore(ABC):
    """
    Abstract base class for conversation persistence.

    A conversation is an id with ``started_at`` / ``last_message_at``
    timestamps and an ordered list of messages. Implementations are
    synchronous; async callers use ``asyncio.to_thread``.
    """

    @abstractmethod
    def create_conversation(self) -> str:
        """Start a conversation and return its id."""
        pass

    @abstractmethod
    def append_message(self, conversation_id: str, role: MessageRole, content: str) -> None:
        """
        Append a message and touch ``last_message_at``.

        Raises:
            ConversationStoreError: If the conversation does not exist or the
                write fails
        """
        pass

    @abstractmethod
    def get_history(self, conversation_id: str) -> list[Message]:
        """Messages in creation order; empty for an unknown id."""
        pass

    def close(self) -> None:
        pass
