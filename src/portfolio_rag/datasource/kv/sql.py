"""
SQL conversation store on SQLModel.

Tables:
    chat_conversations: id, started_at, last_message_at
    chat_messages: id, conversation_id, role, content, created_at

Example:
    >>> store = SQLConversationStore("sqlite:///storage/conversations.db")
    >>> conversation_id = store.create_conversation()
    >>> store.append_message(conversation_id, MessageRole.USER, "Hi")
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from uuid import uuid4

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from portfolio_rag.datasource.kv.base import BaseConversationStore
from portfolio_rag.entities.conversation import Message, MessageRole
from portfolio_rag.entities.document import utcnow
from portfolio_rag.errors import ConversationStoreError

logger = logging.getLogger(__name__)


class ChatConversation(SQLModel, table=True):
    __tablename__ = "chat_conversations"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    started_at: datetime = Field(default_factory=utcnow)
    last_message_at: datetime = Field(default_factory=utcnow)


class ChatMessage(SQLModel, table=True):
    __tablename__ = "chat_messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    conversation_id: str = Field(index=True, foreign_key="chat_conversations.id")
    role: str
    content: str
    created_at: datetime = Field(default_factory=utcnow)


class SQLConversationStore(BaseConversationStore):
    """Conversation store backed by any SQLAlchemy URL (SQLite by default)."""

    def __init__(self, database_url: str = "sqlite:///storage/conversations.db", echo: bool = False):
        self.database_url = database_url
        engine_kwargs: dict = {}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if _is_sqlite_memory(database_url):
                # One shared connection, otherwise each worker thread sees its own empty database
                engine_kwargs["poolclass"] = StaticPool
            else:
                _ensure_sqlite_dir(database_url)

        self.engine = create_engine(database_url, echo=echo, **engine_kwargs)
        SQLModel.metadata.create_all(
            self.engine,
            tables=[ChatConversation.__table__, ChatMessage.__table__],
        )
        logger.debug(f"SQLConversationStore initialized: {database_url}")

    def create_conversation(self) -> str:
        conversation = ChatConversation()
        try:
            with Session(self.engine) as session:
                session.add(conversation)
                session.commit()
                return conversation.id
        except SQLAlchemyError as e:
            raise ConversationStoreError("Failed to create conversation", original_error=e) from e

    def append_message(self, conversation_id: str, role: MessageRole, content: str) -> None:
        try:
            with Session(self.engine) as session:
                conversation = session.get(ChatConversation, conversation_id)
                if conversation is None:
                    raise ConversationStoreError(
                        "Conversation not found",
                        details={"conversation_id": conversation_id},
                    )
                now = utcnow()
                session.add(ChatMessage(
                    conversation_id=conversation_id,
                    role=MessageRole(role).value,
                    content=content,
                    created_at=now,
                ))
                conversation.last_message_at = now
                session.add(conversation)
                session.commit()
        except SQLAlchemyError as e:
            raise ConversationStoreError(
                "Failed to store message",
                details={"conversation_id": conversation_id},
                original_error=e,
            ) from e

    def get_history(self, conversation_id: str) -> list[Message]:
        statement = (
            select(ChatMessage)
            .where(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.created_at, ChatMessage.id)
        )
        try:
            with Session(self.engine) as session:
                rows = session.exec(statement).all()
        except SQLAlchemyError as e:
            raise ConversationStoreError(
                "Failed to load conversation history",
                details={"conversation_id": conversation_id},
                original_error=e,
            ) from e
        return [Message(role=row.role, content=row.content) for row in rows]

    def last_message_at(self, conversation_id: str) -> datetime | None:
        with Session(self.engine) as session:
            conversation = session.get(ChatConversation, conversation_id)
            return conversation.last_message_at if conversation else None

    def close(self) -> None:
        self.engine.dispose()


def _is_sqlite_memory(database_url: str) -> bool:
    url = make_url(database_url)
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


def _ensure_sqlite_dir(database_url: str) -> None:
    path = database_url.split(":///", 1)[-1] if ":///" in database_url else ""
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
