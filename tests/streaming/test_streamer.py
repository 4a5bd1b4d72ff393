"""Tests for ResponseStreamer."""

from collections.abc import AsyncIterator

import pytest

from piko.errors import GenerationError, MessageFrozenError
from piko.events import ChatEvent, EventKind
from piko.models import Message
from piko.streaming import ResponseStreamer, count_word_starts, is_word_character


async def fragments(*parts: str, error: Exception | None = None) -> AsyncIterator[str]:
    for part in parts:
        yield part
    if error is not None:
        raise error


@pytest.fixture
def events() -> list[ChatEvent]:
    return []


@pytest.fixture
def streamer(events: list[ChatEvent]) -> ResponseStreamer:
    return ResponseStreamer(events.append)


def kinds(events: list[ChatEvent]) -> list[EventKind]:
    return [e.kind for e in events]


class TestWordCounting:
    def test_word_characters(self):
        assert is_word_character("a")
        assert is_word_character("7")
        assert is_word_character("'")
        assert is_word_character("’")
        assert not is_word_character(" ")
        assert not is_word_character(",")

    def test_counts_starts(self):
        assert count_word_starts("hello big world", False) == (3, True)

    def test_continues_word_from_previous_fragment(self):
        assert count_word_starts("lo world", True) == (1, True)

    def test_trailing_space_ends_word(self):
        assert count_word_starts("hi ", False) == (1, False)

    def test_apostrophe_inside_word(self):
        assert count_word_starts("don't stop", False) == (2, True)

    def test_curly_apostrophe_inside_word(self):
        assert count_word_starts("it’s fine", False) == (2, True)

    def test_empty_fragment(self):
        assert count_word_starts("", True) == (0, True)


class TestStream:
    @pytest.mark.asyncio
    async def test_concatenates_fragments(self, streamer: ResponseStreamer):
        target = Message.placeholder()
        result = await streamer.stream(fragments("Hel", "lo wor", "ld"), target)

        assert target.text == "Hello world"
        assert result.text == "Hello world"
        assert result.fragments == 3
        assert result.words == 2
        assert result.ok
        assert target.frozen

    @pytest.mark.asyncio
    async def test_event_order(self, streamer: ResponseStreamer, events: list[ChatEvent]):
        await streamer.stream(fragments("Hel", "lo wor", "ld"), Message.placeholder())

        assert kinds(events) == [
            EventKind.GENERATION_STARTED,
            EventKind.TEXT_UPDATED,
            EventKind.WORD_BOUNDARY,
            EventKind.TEXT_UPDATED,
            EventKind.WORD_BOUNDARY,
            EventKind.TEXT_UPDATED,
            EventKind.COMPLETED,
        ]

    @pytest.mark.asyncio
    async def test_started_emitted_once(self, streamer: ResponseStreamer, events: list[ChatEvent]):
        await streamer.stream(fragments("a", "b", "c", "d"), Message.placeholder())
        assert kinds(events).count(EventKind.GENERATION_STARTED) == 1
        assert kinds(events).count(EventKind.COMPLETED) == 1

    @pytest.mark.asyncio
    async def test_text_visible_when_event_fires(self, events: list[ChatEvent]):
        seen: list[str] = []

        def listener(event: ChatEvent) -> None:
            if event.kind is EventKind.TEXT_UPDATED:
                assert event.message is not None
                seen.append(event.message.text)

        streamer = ResponseStreamer(listener)
        await streamer.stream(fragments("One", " two", " three"), Message.placeholder())

        assert seen == ["One", "One two", "One two three"]

    @pytest.mark.asyncio
    async def test_fragment_in_event_data(self, streamer: ResponseStreamer, events: list[ChatEvent]):
        await streamer.stream(fragments("a", "b"), Message.placeholder())
        updates = [e.data["fragment"] for e in events if e.kind is EventKind.TEXT_UPDATED]
        assert updates == ["a", "b"]

    @pytest.mark.asyncio
    async def test_word_boundary_counts_up(self, streamer: ResponseStreamer, events: list[ChatEvent]):
        await streamer.stream(fragments("I don't", " know"), Message.placeholder())
        counts = [e.data["words"] for e in events if e.kind is EventKind.WORD_BOUNDARY]
        assert counts == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_empty_stream(self, streamer: ResponseStreamer, events: list[ChatEvent]):
        target = Message.placeholder()
        result = await streamer.stream(fragments(), target)

        assert result.ok
        assert result.text == ""
        assert result.fragments == 0
        assert kinds(events) == [EventKind.COMPLETED]
        assert target.frozen

    @pytest.mark.asyncio
    async def test_failure_keeps_partial_text(
        self, streamer: ResponseStreamer, events: list[ChatEvent]
    ):
        target = Message.placeholder()
        error = GenerationError("connection reset")
        result = await streamer.stream(fragments("Hello", " wor", error=error), target)

        assert not result.ok
        assert result.error is error
        assert target.text == "Hello wor"
        assert target.frozen
        assert kinds(events).count(EventKind.FAILED) == 1
        assert EventKind.COMPLETED not in kinds(events)
        assert events[-1].data["error"] is error

    @pytest.mark.asyncio
    async def test_failure_before_first_fragment(
        self, streamer: ResponseStreamer, events: list[ChatEvent]
    ):
        target = Message.placeholder()
        result = await streamer.stream(fragments(error=GenerationError("boom")), target)

        assert not result.ok
        assert target.text == ""
        assert kinds(events) == [EventKind.FAILED]

    @pytest.mark.asyncio
    async def test_frozen_target_fails(self, streamer: ResponseStreamer, events: list[ChatEvent]):
        target = Message.assistant("done")
        result = await streamer.stream(fragments("more"), target)

        assert not result.ok
        assert target.text == "done"
        assert kinds(events) == [EventKind.FAILED]

    @pytest.mark.asyncio
    async def test_append_after_completion_rejected(self, streamer: ResponseStreamer):
        target = Message.placeholder()
        await streamer.stream(fragments("hi"), target)

        with pytest.raises(MessageFrozenError):
            target.append("!")
