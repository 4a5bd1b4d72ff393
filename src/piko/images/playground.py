"""Image generation hand-off."""

import base64
import binascii
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@runtime_checkable
class ImagePlayground(Protocol):
    """Turns a prompt into image bytes.

    Returning None, or raising ImageGenerationCancelled, means the request
    was dismissed and nothing should be shown.
    """

    async def generate(self, prompt: str) -> bytes | None: ...


class NullImagePlayground:
    """Used when no image backend is configured. Always cancels."""

    async def generate(self, prompt: str) -> bytes | None:
        logger.info("Image generation not configured, dropping prompt")
        return None


class HttpImagePlayground:
    """Client for an OpenAI-compatible ``/images/generations`` endpoint.

    Backend failures are treated as a dismissed request: they are logged
    and None is returned.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        model: str | None = None,
        size: str = "1024x1024",
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._api_key = api_key
        self._model = model
        self._size = size
        self._timeout = timeout
        self._client = client

    def _payload(self, prompt: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "prompt": prompt,
            "n": 1,
            "size": self._size,
            "response_format": "b64_json",
        }
        if self._model:
            payload["model"] = self._model
        return payload

    def _headers(self) -> dict[str, str]:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> httpx.Response:
        return await client.post(self.endpoint, json=self._payload(prompt), headers=self._headers())

    async def generate(self, prompt: str) -> bytes | None:
        try:
            if self._client is not None:
                response = await self._post(self._client, prompt)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._post(client, prompt)
        except httpx.TimeoutException:
            logger.warning("Image request timed out after %ss", self._timeout)
            return None
        except httpx.RequestError as e:
            logger.warning("Image request failed: %s", e)
            return None

        if not response.is_success:
            logger.warning("Image backend returned HTTP %s", response.status_code)
            return None

        return self._decode(response)

    def _decode(self, response: httpx.Response) -> bytes | None:
        try:
            data = response.json()["data"][0]["b64_json"]
            return base64.b64decode(data, validate=True)
        except (ValueError, KeyError, IndexError, TypeError, binascii.Error) as e:
            logger.warning("Malformed image response: %s", e)
            return None
