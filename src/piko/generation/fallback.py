"""Try one generator, fall back to another."""

import logging
from collections.abc import AsyncIterator

from ..errors import GenerationError
from .base import TextGenerator

logger = logging.getLogger(__name__)


class FallbackGenerator:
    """Uses primary unless it fails to start, then secondary.

    Only invocation failures trigger the fallback. A stream that breaks
    mid-way is reported as-is.
    """

    def __init__(self, primary: TextGenerator, secondary: TextGenerator) -> None:
        self.primary = primary
        self.secondary = secondary

    @property
    def name(self) -> str:
        return f"{self.primary.name}+{self.secondary.name}"

    async def generate(
        self,
        prompt: str,
        history: list[dict[str, str]] | None = None,
    ) -> AsyncIterator[str]:
        try:
            return await self.primary.generate(prompt, history)
        except GenerationError as e:
            logger.info("%s unavailable, using %s: %s", self.primary.name, self.secondary.name, e)
            return await self.secondary.generate(prompt, history)
