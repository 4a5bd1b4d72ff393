"""Application-level events published to UI layers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .models import Message


class EventKind(Enum):
    """Kinds of events a listener may receive."""

    SESSION_CREATED = "session_created"
    SESSION_DELETED = "session_deleted"
    TITLE_CHANGED = "title_changed"
    MESSAGE_APPENDED = "message_appended"
    COMPOSING_CHANGED = "composing_changed"
    IMAGE_REQUESTED = "image_requested"
    BUSY = "busy"
    GENERATION_STARTED = "generation_started"
    TEXT_UPDATED = "text_updated"
    WORD_BOUNDARY = "word_boundary"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ChatEvent:
    """A single event.

    Attributes:
        kind: What happened.
        message: The message concerned, if any.
        data: Extra payload (e.g. composing flag, error, fragment).
    """

    kind: EventKind
    message: Message | None = None
    data: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[ChatEvent], None]


def ignore(event: ChatEvent) -> None:
    """Listener that drops every event."""
