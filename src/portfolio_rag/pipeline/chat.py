"""
Chat Pipeline Module.

User message -> (history) -> retrieve context -> build prompt -> completion
-> persist the exchange.

Retrieval is best effort: when it fails the answer is generated without
context. Any other failure becomes a generic apology with the reason in a
separate ``error`` field, so the end user never sees internal details.
"""

import asyncio

from loguru import logger
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from portfolio_rag.datasource.kv.base import BaseConversationStore
from portfolio_rag.entities.conversation import Message, MessageRole
from portfolio_rag.entities.search_result import ContextItem, RetrievedContext
from portfolio_rag.errors import RetrievalDegradedError, ValidationError, wrap_exception
from portfolio_rag.llm.base import BaseLLM
from portfolio_rag.pipeline import prompts
from portfolio_rag.retrieval.context import format_context
from portfolio_rag.retrieval.retriever import Retriever


class ChatOptions(BaseModel):
    """Per-call chat options. Accepts the web client's camelCase keys too."""

    max_context_length: int = Field(default=8, ge=0, description="History kept, in exchanges")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    retrieval_enabled: bool = True
    retrieval_count: int = Field(default=5, gt=0)
    include_history: bool = True
    conversation_id: str | None = None
    use_entity_filter: bool = False
    # Answer with the canned reply instead of calling the model when nothing relevant is found.
    # Always narrows retrieval with the entity filter.
    require_context: bool = False

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class ChatResponse(BaseModel):
    message: str
    conversation_id: str | None = None
    # Context items the answer was grounded on, only set in require_context mode
    context: list[ContextItem] | None = None
    error: str | None = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class ChatOrchestrator:
    """
    Answers a user message as the portfolio owner's persona.

    Attributes:
        persona: Rendered persona system prompt
        max_context_chars: Budget for the retrieved context block
    """

    def __init__(
        self,
        llm: BaseLLM,
        retriever: Retriever | None = None,
        conversation_store: BaseConversationStore | None = None,
        persona: str | None = None,
        max_context_chars: int = 6000,
        max_tokens: int | None = None,
    ):
        self.llm = llm
        self.retriever = retriever
        self.conversation_store = conversation_store
        self.persona = persona or prompts.persona_prompt(
            "the portfolio owner", "software developer", "an undisclosed location"
        )
        self.max_context_chars = max_context_chars
        self.max_tokens = max_tokens

    async def respond(
        self,
        message: str,
        history: list[Message] | None = None,
        options: ChatOptions | None = None,
    ) -> ChatResponse:
        """Generate a reply. Never raises."""
        options = options or ChatOptions()
        try:
            if not message or not message.strip():
                raise ValidationError("Message is required")
            return await self._respond(message, history or [], options)
        except Exception as e:
            error = wrap_exception(e, "Chat failed")
            logger.error(f"[Chat] {error}")
            return ChatResponse(message=prompts.APOLOGY_REPLY, error=error.message)

    async def _respond(self, message: str, history: list[Message], options: ChatOptions) -> ChatResponse:
        relevant_history = await self._load_history(history, options)

        context = await self._retrieve(message, options)
        grounding = None
        if options.require_context:
            grounding = list(context.items) if context is not None else []
            if not grounding:
                logger.info("[Chat] No relevant context, answering with the canned reply")
                return ChatResponse(
                    message=prompts.NO_CONTEXT_REPLY,
                    conversation_id=options.conversation_id,
                    context=[],
                )

        messages = self._build_messages(message, relevant_history, context, options.require_context)
        logger.info(
            f"[Chat] Sending {len(messages)} messages to the model "
            f"(history={len(relevant_history)}, context={len(context.items) if context else 0})"
        )
        answer = await self.llm.chat(
            messages=messages,
            temperature=options.temperature,
            max_tokens=self.max_tokens,
        )

        conversation_id = await self._persist(message, answer, options)
        return ChatResponse(message=answer, conversation_id=conversation_id, context=grounding)

    async def _load_history(self, history: list[Message], options: ChatOptions) -> list[Message]:
        if not options.include_history:
            return []

        if options.conversation_id and self.conversation_store is not None:
            relevant = await asyncio.to_thread(self.conversation_store.get_history, options.conversation_id)
        else:
            relevant = list(history)

        return truncate_history(relevant, options.max_context_length)

    async def _retrieve(self, message: str, options: ChatOptions) -> RetrievedContext | None:
        if not options.retrieval_enabled or self.retriever is None:
            return None
        try:
            return await self.retriever.retrieve_context(
                message,
                limit=options.retrieval_count,
                use_entity_filter=options.use_entity_filter or options.require_context,
            )
        except Exception as e:
            degraded = RetrievalDegradedError("Retrieval failed, answering without context", original_error=e)
            logger.warning(f"[Chat] {degraded}")
            return None

    def _build_messages(
        self,
        message: str,
        history: list[Message],
        context: RetrievedContext | None,
        strict: bool,
    ) -> list[dict[str, str]]:
        system = self.persona
        if context is not None and context.found:
            system += f"\n\n{prompts.CONTEXT_PREAMBLE}\n\n{format_context(context.items, self.max_context_chars)}"
            if strict:
                system += f"\n\n{prompts.STRICT_CONTEXT_GUIDELINES}"

        messages = [{"role": MessageRole.SYSTEM.value, "content": system}]
        messages.extend(m.to_openai() for m in history)
        messages.append({"role": MessageRole.USER.value, "content": message})
        return messages

    async def _persist(self, message: str, answer: str, options: ChatOptions) -> str | None:
        store = self.conversation_store
        conversation_id = options.conversation_id
        if store is None:
            return conversation_id

        if conversation_id is None:
            if not options.include_history:
                return None
            conversation_id = await asyncio.to_thread(store.create_conversation)

        await asyncio.to_thread(store.append_message, conversation_id, MessageRole.USER, message)
        await asyncio.to_thread(store.append_message, conversation_id, MessageRole.ASSISTANT, answer)
        return conversation_id


def truncate_history(history: list[Message], max_context_length: int) -> list[Message]:
    """Keep the last ``max_context_length * 2`` messages, in original order."""
    limit = max_context_length * 2
    if limit <= 0:
        return []
    return history[-limit:] if len(history) > limit else list(history)
