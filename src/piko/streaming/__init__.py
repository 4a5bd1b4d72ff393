"""Streaming of generated text into messages."""

from .streamer import ResponseStreamer, StreamResult, count_word_starts, is_word_character

__all__ = ["ResponseStreamer", "StreamResult", "count_word_starts", "is_word_character"]
