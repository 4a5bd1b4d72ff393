"""Local model served by Ollama."""

import json
import logging
from collections.abc import AsyncIterator

import httpx

from ..errors import GenerationError
from .base import build_messages

logger = logging.getLogger(__name__)


class OllamaGenerator:
    """Streams replies from an Ollama server's /api/chat endpoint.

    Ollama answers with newline-delimited JSON objects, each carrying a
    ``message.content`` fragment, until one arrives with ``done: true``.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.2",
        system: str | None = None,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.host = host.rstrip("/")
        self._model = model
        self._system = system
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        prompt: str,
        history: list[dict[str, str]] | None = None,
    ) -> AsyncIterator[str]:
        payload = {
            "model": self._model,
            "messages": build_messages(prompt, history, self._system),
            "stream": True,
        }
        client = self._client or httpx.AsyncClient(timeout=self._timeout)
        owns_client = self._client is None

        try:
            request = client.build_request("POST", f"{self.host}/api/chat", json=payload)
            response = await client.send(request, stream=True)
        except httpx.RequestError as e:
            if owns_client:
                await client.aclose()
            logger.warning("Ollama unreachable at %s: %s", self.host, e)
            raise GenerationError(f"Local model unavailable: {e}") from e

        if not response.is_success:
            await response.aread()
            await response.aclose()
            if owns_client:
                await client.aclose()
            raise GenerationError(f"Local model returned HTTP {response.status_code}")

        return self._fragments(client, response, owns_client)

    async def _fragments(
        self,
        client: httpx.AsyncClient,
        response: httpx.Response,
        owns_client: bool,
    ) -> AsyncIterator[str]:
        try:
            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                data = json.loads(line)
                if "error" in data:
                    raise GenerationError(f"Local model error: {data['error']}")
                content = data.get("message", {}).get("content")
                if content:
                    yield content
                if data.get("done"):
                    break
        except httpx.RequestError as e:
            raise GenerationError(f"Local model stream interrupted: {e}") from e
        except json.JSONDecodeError as e:
            raise GenerationError(f"Malformed response from local model: {e}") from e
        finally:
            await response.aclose()
            if owns_client:
                await client.aclose()
