"""Conversation orchestration."""

from .conversation import (
    ALARM_UNAVAILABLE_MESSAGE,
    ALARM_UNPARSED_MESSAGE,
    BUSY_MESSAGE,
    GENERATION_ERROR_MESSAGE,
    IMAGE_READY_MESSAGE,
    ConversationSession,
    State,
)

__all__ = [
    "ALARM_UNAVAILABLE_MESSAGE",
    "ALARM_UNPARSED_MESSAGE",
    "BUSY_MESSAGE",
    "GENERATION_ERROR_MESSAGE",
    "IMAGE_READY_MESSAGE",
    "ConversationSession",
    "State",
]
