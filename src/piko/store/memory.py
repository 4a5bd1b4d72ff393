"""Process-local conversation store."""

from ..errors import StoreError
from ..models import Message, Session


class InMemoryConversationStore:
    """Keeps sessions in a dict. Nothing survives the process."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def create_session(self, title: str | None = None) -> Session:
        session = Session(title=title)
        self._sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[Session]:
        return sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)

    def rename_session(self, session: Session, title: str) -> None:
        session.title = title

    def delete_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def add_message(self, session: Session, message: Message) -> Message:
        if session.id not in self._sessions:
            raise StoreError(f"Unknown session: {session.id}")
        message.session_id = session.id
        session.messages.append(message)
        return message

    def save_message(self, message: Message) -> None:
        # Messages are held by reference; nothing to write.
        pass

    def delete_message(self, session: Session, message: Message) -> None:
        session.messages = [m for m in session.messages if m.id != message.id]
