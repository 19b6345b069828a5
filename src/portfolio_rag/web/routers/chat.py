"""Chat API"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from portfolio_rag.engine import PortfolioRAG
from portfolio_rag.entities.conversation import Message
from portfolio_rag.pipeline.chat import ChatOptions, ChatResponse
from portfolio_rag.web.dependencies import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


class ChatRequest(BaseModel):
    message: str = ""
    history: list[Message] = Field(default_factory=list)
    conversation_id: str | None = None
    options: ChatOptions = Field(default_factory=ChatOptions)

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


@router.post("", response_model=ChatResponse)
async def chat(req: ChatRequest, engine: PortfolioRAG = Depends(get_engine)):
    """Answer a message as the portfolio owner. Responds with camelCase keys."""
    if not req.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    options = req.options
    if req.conversation_id:
        options = options.model_copy(update={"conversation_id": req.conversation_id})

    response = await engine.chat(req.message, req.history, options)
    if response.error:
        logger.warning(f"Chat request degraded to fallback reply: {response.error}")
    return response
