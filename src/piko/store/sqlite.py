"""SQLite conversation store."""

import sqlite3
from datetime import datetime
from pathlib import Path

from ..errors import StoreError
from ..models import Author, Message, Session


class SQLiteConversationStore:
    """Persistent sessions and messages using SQLite.

    Messages reference their session with ON DELETE CASCADE, so deleting
    a session removes its messages. Attachments are stored as BLOBs.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
        return self._conn

    def init_db(self) -> None:
        """Create tables if they don't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS sessions (
                id          TEXT PRIMARY KEY,
                title       TEXT,
                created_at  TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS messages (
                seq         INTEGER PRIMARY KEY AUTOINCREMENT,
                id          TEXT NOT NULL UNIQUE,
                session_id  TEXT NOT NULL REFERENCES sessions(id) ON DELETE CASCADE,
                author      TEXT NOT NULL,
                text        TEXT NOT NULL DEFAULT '',
                attachment  BLOB,
                created_at  TEXT NOT NULL
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_messages_session ON messages(session_id, created_at)"
        )
        conn.commit()

    def create_session(self, title: str | None = None) -> Session:
        session = Session(title=title)
        conn = self._get_connection()
        conn.execute(
            "INSERT INTO sessions (id, title, created_at) VALUES (?, ?, ?)",
            (session.id, session.title, session.created_at.isoformat()),
        )
        conn.commit()
        return session

    def get_session(self, session_id: str) -> Session | None:
        conn = self._get_connection()
        row = conn.execute(
            "SELECT id, title, created_at FROM sessions WHERE id = ?",
            (session_id,),
        ).fetchone()
        if row is None:
            return None

        session = self._row_to_session(row)
        cursor = conn.execute(
            """
            SELECT id, session_id, author, text, attachment, created_at
            FROM messages WHERE session_id = ?
            ORDER BY created_at, seq
            """,
            (session_id,),
        )
        session.messages = [self._row_to_message(r) for r in cursor.fetchall()]
        return session

    def list_sessions(self) -> list[Session]:
        """All sessions, newest first, without their messages."""
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT id, title, created_at FROM sessions ORDER BY created_at DESC"
        )
        return [self._row_to_session(row) for row in cursor.fetchall()]

    def rename_session(self, session: Session, title: str) -> None:
        conn = self._get_connection()
        conn.execute("UPDATE sessions SET title = ? WHERE id = ?", (title, session.id))
        conn.commit()
        session.title = title

    def delete_session(self, session_id: str) -> bool:
        conn = self._get_connection()
        cursor = conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        conn.commit()
        return cursor.rowcount > 0

    def add_message(self, session: Session, message: Message) -> Message:
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO messages (id, session_id, author, text, attachment, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    message.id,
                    session.id,
                    message.author.value,
                    message.text,
                    message.attachment,
                    message.created_at.isoformat(),
                ),
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise StoreError(f"Cannot add message to session {session.id}: {e}") from e

        message.session_id = session.id
        session.messages.append(message)
        return message

    def save_message(self, message: Message) -> None:
        conn = self._get_connection()
        conn.execute("UPDATE messages SET text = ? WHERE id = ?", (message.text, message.id))
        conn.commit()

    def delete_message(self, session: Session, message: Message) -> None:
        conn = self._get_connection()
        conn.execute("DELETE FROM messages WHERE id = ?", (message.id,))
        conn.commit()
        session.messages = [m for m in session.messages if m.id != message.id]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_session(self, row: sqlite3.Row) -> Session:
        return Session(
            id=row["id"],
            title=row["title"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_message(self, row: sqlite3.Row) -> Message:
        return Message(
            id=row["id"],
            session_id=row["session_id"],
            author=Author(row["author"]),
            text=row["text"],
            attachment=row["attachment"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
