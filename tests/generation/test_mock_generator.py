"""Tests for MockGenerator."""

import random

import pytest

from piko.generation import MockGenerator, TextGenerator
from piko.generation.mock import RESPONSES


@pytest.fixture
def generator() -> MockGenerator:
    return MockGenerator(thinking_delay=0, typing_delay=0, responses=["Hi {prompt}!"])


def test_is_text_generator(generator: MockGenerator):
    assert isinstance(generator, TextGenerator)
    assert generator.name == "mock"


@pytest.mark.asyncio
async def test_types_one_character_at_a_time(generator: MockGenerator):
    source = await generator.generate("cats")
    fragments = [fragment async for fragment in source]

    assert "".join(fragments) == "Hi cats!"
    assert all(len(f) == 1 for f in fragments)


@pytest.mark.asyncio
async def test_history_ignored(generator: MockGenerator):
    source = await generator.generate("cats", [{"role": "user", "content": "earlier"}])
    assert "".join([f async for f in source]) == "Hi cats!"


def test_default_responses_used():
    generator = MockGenerator(thinking_delay=0, typing_delay=0, rng=random.Random(7))
    reply = generator.pick_response("tea")
    assert reply in [r.format(prompt="tea") for r in RESPONSES]


def test_seeded_rng_is_deterministic():
    first = MockGenerator(rng=random.Random(3)).pick_response("x")
    second = MockGenerator(rng=random.Random(3)).pick_response("x")
    assert first == second
