"""Incremental rendering of generated text."""

import logging
from collections.abc import AsyncIterable
from dataclasses import dataclass

from ..events import ChatEvent, EventKind, Listener, ignore
from ..models import Message

logger = logging.getLogger(__name__)

WORD_PUNCTUATION = frozenset("'’")


def is_word_character(char: str) -> bool:
    return char.isalnum() or char in WORD_PUNCTUATION


def count_word_starts(fragment: str, inside_word: bool) -> tuple[int, bool]:
    """Count words that begin in fragment.

    Args:
        fragment: Newly received text.
        inside_word: Whether the previous fragment ended mid-word.

    Returns:
        (number of word starts, inside_word state after the fragment).
    """
    started = 0
    for char in fragment:
        if is_word_character(char):
            if not inside_word:
                started += 1
            inside_word = True
        else:
            inside_word = False
    return started, inside_word


@dataclass
class StreamResult:
    """Outcome of streaming into a message."""

    text: str
    fragments: int
    words: int
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ResponseStreamer:
    """Append fragments to a message and publish feedback events.

    Events are delivered synchronously right after the text mutation they
    describe: GENERATION_STARTED on the first fragment, TEXT_UPDATED per
    fragment, WORD_BOUNDARY per word start, then COMPLETED or FAILED once.
    """

    def __init__(self, listener: Listener | None = None) -> None:
        self.listener = listener or ignore

    def _emit(self, kind: EventKind, message: Message, **data) -> None:
        self.listener(ChatEvent(kind=kind, message=message, data=data))

    async def stream(self, source: AsyncIterable[str], target: Message) -> StreamResult:
        """Drain source into target.

        Failures are terminal: partial text is kept, the message is frozen,
        and the error is returned rather than raised.
        """
        fragments = 0
        words = 0
        inside_word = False

        try:
            async for fragment in source:
                target.append(fragment)
                fragments += 1

                if fragments == 1:
                    self._emit(EventKind.GENERATION_STARTED, target)
                self._emit(EventKind.TEXT_UPDATED, target, fragment=fragment)

                started, inside_word = count_word_starts(fragment, inside_word)
                for _ in range(started):
                    words += 1
                    self._emit(EventKind.WORD_BOUNDARY, target, words=words)
        except Exception as e:
            target.freeze()
            logger.warning("Stream failed after %d fragment(s): %s", fragments, e)
            self._emit(EventKind.FAILED, target, error=e)
            return StreamResult(text=target.text, fragments=fragments, words=words, error=e)

        target.freeze()
        self._emit(EventKind.COMPLETED, target, words=words)
        return StreamResult(text=target.text, fragments=fragments, words=words)
