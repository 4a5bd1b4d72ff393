"""Offline generator with canned, playful replies."""

import asyncio
import random
from collections.abc import AsyncIterator

RESPONSES = [
    "Ooh, that's a fun topic! Let me tell you what I know about {prompt}. 🌟",
    "Thinking... thinking... Got it! Here's the scoop on that. 🍦",
    "I'm feeling super helpful today! Let's dive into that. 🏊‍♂️",
    "Beep boop! Just kidding, I'm not a robot... well, kinda. Here's what you need to know! 🤖",
    "That's a great question! Let me sprinkle some knowledge on that for you. ✨",
]


class MockGenerator:
    """Yields one canned response a character at a time.

    Args:
        thinking_delay: Seconds to wait before the first character.
        typing_delay: Seconds between characters.
        responses: Override the canned responses. ``{prompt}`` is filled in.
        rng: Random source, injectable for deterministic tests.
    """

    def __init__(
        self,
        thinking_delay: float = 1.0,
        typing_delay: float = 0.03,
        responses: list[str] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.thinking_delay = thinking_delay
        self.typing_delay = typing_delay
        self.responses = responses or RESPONSES
        self._rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "mock"

    def pick_response(self, prompt: str) -> str:
        return self._rng.choice(self.responses).format(prompt=prompt)

    async def generate(
        self,
        prompt: str,
        history: list[dict[str, str]] | None = None,
    ) -> AsyncIterator[str]:
        return self._type_out(self.pick_response(prompt))

    async def _type_out(self, text: str) -> AsyncIterator[str]:
        if self.thinking_delay:
            await asyncio.sleep(self.thinking_delay)
        for char in text:
            if self.typing_delay:
                await asyncio.sleep(self.typing_delay)
            yield char
