"""Text generation interface.

Backends implement the TextGenerator Protocol:

    source = await generator.generate("Hello")   # may raise GenerationError
    async for fragment in source:                # may raise mid-stream
        ...

Awaiting ``generate`` is the invocation step; failures there mean nothing
was produced. Failures during iteration leave partial output behind.
"""

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class TextGenerator(Protocol):
    """Produces a stream of text fragments for a prompt."""

    @property
    def name(self) -> str:
        """Short backend name used in logs."""
        ...

    async def generate(
        self,
        prompt: str,
        history: list[dict[str, str]] | None = None,
    ) -> AsyncIterator[str]:
        """Start generating a reply.

        Args:
            prompt: The current user message.
            history: Earlier turns in chat-completion format, oldest first.

        Returns:
            An async iterator of text fragments.

        Raises:
            GenerationError: If the backend cannot start generating.
        """
        ...


def build_messages(
    prompt: str,
    history: list[dict[str, str]] | None,
    system: str | None,
) -> list[dict[str, str]]:
    """Assemble a chat-completion message list."""
    messages: list[dict[str, str]] = []
    if system:
        messages.append({"role": "system", "content": system})
    if history:
        messages.extend(history)
    messages.append({"role": "user", "content": prompt})
    return messages
