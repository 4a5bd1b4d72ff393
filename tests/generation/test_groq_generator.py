"""Tests for GroqGenerator."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from groq import APIConnectionError, APIError

from piko.errors import GenerationError
from piko.generation import GroqGenerator

REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


def chunk(content: str | None) -> MagicMock:
    """Create a streaming chunk with one delta."""
    choice = MagicMock()
    choice.delta.content = content
    result = MagicMock()
    result.choices = [choice]
    return result


class FakeStream:
    """Async iterable of chunks, optionally failing at the end."""

    def __init__(self, chunks: list, error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self.chunks:
            yield item
        if self.error is not None:
            raise self.error


def make_client(stream=None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=stream, side_effect=error)
    return client


@pytest.mark.asyncio
async def test_streams_delta_content():
    client = make_client(FakeStream([chunk("Hel"), chunk(None), chunk("lo")]))
    generator = GroqGenerator(client, model="test-model")

    source = await generator.generate("Hi")
    fragments = [f async for f in source]

    assert fragments == ["Hel", "lo"]
    assert generator.name == "groq"


@pytest.mark.asyncio
async def test_sends_system_history_and_prompt():
    client = make_client(FakeStream([]))
    generator = GroqGenerator(client, model="test-model", system="Be brief.")
    history = [
        {"role": "user", "content": "Hello"},
        {"role": "assistant", "content": "Hi!"},
    ]

    await generator.generate("How are you?", history)

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["stream"] is True
    assert kwargs["messages"] == [
        {"role": "system", "content": "Be brief."},
        *history,
        {"role": "user", "content": "How are you?"},
    ]


@pytest.mark.asyncio
async def test_skips_chunks_without_choices():
    empty = MagicMock()
    empty.choices = []
    client = make_client(FakeStream([empty, chunk("ok")]))

    source = await GroqGenerator(client).generate("Hi")

    assert [f async for f in source] == ["ok"]


@pytest.mark.asyncio
async def test_request_failure_raises_generation_error():
    client = make_client(error=APIConnectionError(request=REQUEST))
    generator = GroqGenerator(client)

    with pytest.raises(GenerationError):
        await generator.generate("Hi")


@pytest.mark.asyncio
async def test_mid_stream_failure_raises_generation_error():
    error = APIError("stream closed", REQUEST, body=None)
    client = make_client(FakeStream([chunk("Par"), chunk("tial")], error=error))
    source = await GroqGenerator(client).generate("Hi")

    received = []
    with pytest.raises(GenerationError):
        async for fragment in source:
            received.append(fragment)

    assert received == ["Par", "tial"]
