"""Base completion interface."""

from abc import ABC, abstractmethod
from typing import Any


class BaseLLM(ABC):
    """Abstract base class for chat completion services.

    Messages use the OpenAI wire shape: ``{"role": ..., "content": ...}``.
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        """Return the assistant reply for ``messages``.

        Args:
            messages: Conversation so far, system prompt first
            temperature: Sampling temperature
            max_tokens: Upper bound on generated tokens (provider default if None)
            response_format: e.g. ``{"type": "json_object"}``

        Returns:
            The reply text; empty string when the service returned no content

        Raises:
            CompletionError: If the service fails
        """
        pass
