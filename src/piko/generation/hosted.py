"""Hosted platform model via the Groq API."""

import logging
import os
from collections.abc import AsyncIterator
from typing import Any

from groq import APIError, AsyncGroq

from ..errors import GenerationError
from .base import build_messages

logger = logging.getLogger(__name__)


class GroqGenerator:
    """Streams chat completions from Groq.

    Example:
        from groq import AsyncGroq

        generator = GroqGenerator(AsyncGroq(api_key="..."))
        source = await generator.generate("Tell me a joke")
    """

    def __init__(
        self,
        client: AsyncGroq | None = None,
        model: str = "llama-3.1-70b-versatile",
        system: str | None = None,
    ) -> None:
        self._client = client or AsyncGroq(api_key=os.getenv("GROQ_API_KEY"))
        self._model = model
        self._system = system

    @property
    def name(self) -> str:
        return "groq"

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        prompt: str,
        history: list[dict[str, str]] | None = None,
    ) -> AsyncIterator[str]:
        messages = build_messages(prompt, history, self._system)
        try:
            stream = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,  # type: ignore[arg-type]
                stream=True,
            )
        except APIError as e:
            logger.warning("Groq request failed: %s", e)
            raise GenerationError(f"Groq request failed: {e}") from e

        return self._fragments(stream)

    async def _fragments(self, stream: Any) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
        except APIError as e:
            raise GenerationError(f"Groq stream interrupted: {e}") from e
