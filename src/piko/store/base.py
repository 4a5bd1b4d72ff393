"""Conversation storage interface."""

from typing import Protocol, runtime_checkable

from ..models import Message, Session


@runtime_checkable
class ConversationStore(Protocol):
    """CRUD over sessions and their messages.

    Writes are durable as soon as the call returns.
    """

    def create_session(self, title: str | None = None) -> Session: ...

    def get_session(self, session_id: str) -> Session | None: ...

    def list_sessions(self) -> list[Session]:
        """All sessions, newest first."""
        ...

    def rename_session(self, session: Session, title: str) -> None: ...

    def delete_session(self, session_id: str) -> bool:
        """Delete a session and its messages. Returns True if it existed."""
        ...

    def add_message(self, session: Session, message: Message) -> Message:
        """Append message to session and persist it."""
        ...

    def save_message(self, message: Message) -> None:
        """Persist the current text of a message already in the store."""
        ...

    def delete_message(self, session: Session, message: Message) -> None: ...
