"""Data models for conversations."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .errors import MessageFrozenError

DEFAULT_TITLE = "New Chat"


def _new_id() -> str:
    return uuid.uuid4().hex


class Author(Enum):
    """Who wrote a message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """One turn in a conversation.

    Attributes:
        text: Message body. Append-only while streaming, frozen afterwards.
        author: USER or ASSISTANT.
        attachment: Optional binary payload (e.g. a generated image).
        session_id: Owning session, set when the message is added to one.
        id: Opaque identifier.
        created_at: Creation time, never mutated.
        frozen: Whether the text may still grow.
    """

    text: str
    author: Author
    attachment: bytes | None = None
    session_id: str | None = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)
    frozen: bool = True

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(text=text, author=Author.USER)

    @classmethod
    def assistant(cls, text: str, attachment: bytes | None = None) -> "Message":
        return cls(text=text, author=Author.ASSISTANT, attachment=attachment)

    @classmethod
    def placeholder(cls) -> "Message":
        """Empty assistant message that a stream will fill in."""
        return cls(text="", author=Author.ASSISTANT, frozen=False)

    @property
    def is_user(self) -> bool:
        return self.author is Author.USER

    def append(self, fragment: str) -> None:
        """Append streamed text."""
        if self.frozen:
            raise MessageFrozenError(f"Message {self.id} is no longer streaming")
        self.text += fragment

    def freeze(self) -> None:
        self.frozen = True

    def to_llm(self) -> dict[str, str]:
        """Return the message in chat-completion format."""
        return {"role": self.author.value, "content": self.text}


@dataclass
class Session:
    """An ordered conversation."""

    title: str | None = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)
    messages: list[Message] = field(default_factory=list)

    @property
    def display_title(self) -> str:
        return self.title or DEFAULT_TITLE

    @property
    def user_message_count(self) -> int:
        return sum(1 for m in self.messages if m.is_user)

    def sorted_messages(self) -> list[Message]:
        """Messages by creation time; insertion order breaks ties."""
        return sorted(self.messages, key=lambda m: m.created_at)

    def history(self, limit: int = 20, exclude_last: bool = False) -> list[dict[str, str]]:
        """Recent non-empty messages in chat-completion format."""
        if limit <= 0:
            return []
        messages = self.messages[:-1] if exclude_last else self.messages
        return [m.to_llm() for m in messages[-limit:] if m.text]
