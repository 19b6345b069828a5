"""Completion client for OpenAI-compatible chat APIs."""

from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from portfolio_rag.errors import CompletionError, wrap_exception
from portfolio_rag.llm.base import BaseLLM


class OpenAILLM(BaseLLM):
    """
    Chat completions through the ``openai`` SDK.

    The AsyncOpenAI client is created by the caller (see ``engine.PortfolioRAG``)
    so the API key, base URL and timeout are decided in one place.
    """

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if response_format is not None:
            params["response_format"] = response_format

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            classified = wrap_exception(e, "Completion request failed")
            logger.error(f"[OpenAILLM] {classified}")
            raise CompletionError(
                str(classified.message),
                details={"model": self.model},
                original_error=classified,
            ) from e

        if not response.choices:
            logger.warning("[OpenAILLM] Completion returned no choices")
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self.client.close()
