from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from portfolio_rag.errors import CompletionError, RateLimitError, RequestTimeoutError
from portfolio_rag.llm.providers import OpenAILLM


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def client():
    mock = MagicMock()
    mock.chat.completions.create = AsyncMock(return_value=completion("Hi there"))
    mock.close = AsyncMock()
    return mock


class TestOpenAILLM:

    @pytest.mark.asyncio
    async def test_chat_returns_first_choice(self, client):
        llm = OpenAILLM(client, model="gpt-4o-mini")
        messages = [{"role": "user", "content": "Hello"}]

        reply = await llm.chat(messages, temperature=0.2)

        assert reply == "Hi there"
        client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o-mini", messages=messages, temperature=0.2
        )

    @pytest.mark.asyncio
    async def test_optional_parameters_forwarded(self, client):
        llm = OpenAILLM(client, model="gpt-4o-mini")

        await llm.chat([], max_tokens=200, response_format={"type": "json_object"})

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 200
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_no_choices_returns_empty(self, client):
        client.chat.completions.create.return_value = SimpleNamespace(choices=[])

        assert await OpenAILLM(client, model="m").chat([]) == ""

    @pytest.mark.asyncio
    async def test_null_content_returns_empty(self, client):
        client.chat.completions.create.return_value = completion(None)

        assert await OpenAILLM(client, model="m").chat([]) == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raised,kind", [
        (TimeoutError("request timed out"), RequestTimeoutError),
        (RuntimeError("429 Too Many Requests"), RateLimitError),
    ])
    async def test_errors_become_completion_errors(self, client, raised, kind):
        client.chat.completions.create.side_effect = raised

        with pytest.raises(CompletionError) as exc_info:
            await OpenAILLM(client, model="m").chat([])

        assert isinstance(exc_info.value.original_error, kind)
        assert exc_info.value.details == {"model": "m"}

    @pytest.mark.asyncio
    async def test_close(self, client):
        await OpenAILLM(client, model="m").close()

        client.close.assert_awaited_once()
