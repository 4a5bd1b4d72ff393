"""SQLite-backed reminders."""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..errors import PermissionDeniedError, ReminderStorageError
from .base import confirmation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reminder:
    """A stored reminder.

    Attributes:
        title: What to be reminded about.
        due_at: When, or None for an undated reminder.
        id: Database ID, None until saved.
        created_at: ISO timestamp when created.
    """

    title: str
    due_at: datetime | None = None
    id: int | None = None
    created_at: str | None = None


class ReminderStore:
    """Persistent reminders using SQLite.

    Implements the ReminderService Protocol. A read-only store refuses
    writes with PermissionDeniedError.
    """

    def __init__(self, db_path: Path, read_only: bool = False) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
            read_only: Refuse to create reminders.
        """
        self.db_path = db_path
        self.read_only = read_only
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the reminders table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS reminders (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                title       TEXT NOT NULL,
                due_at      TEXT,
                created_at  TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        conn.execute("CREATE INDEX IF NOT EXISTS idx_reminders_due ON reminders(due_at)")
        conn.commit()

    def save(self, title: str, due_at: datetime | None = None) -> Reminder:
        """Insert a reminder and return it with its id.

        Raises:
            PermissionDeniedError: If the store is read-only.
            ReminderStorageError: If the database write fails.
        """
        if self.read_only:
            raise PermissionDeniedError("Reminder access denied. Please enable it in settings.")

        try:
            conn = self._get_connection()
            cursor = conn.execute(
                """
                INSERT INTO reminders (title, due_at)
                VALUES (?, ?)
                RETURNING id, created_at
                """,
                (title, due_at.isoformat() if due_at else None),
            )
            row = cursor.fetchone()
            conn.commit()
        except sqlite3.Error as e:
            logger.error("Failed to save reminder: %s", e)
            raise ReminderStorageError(f"Could not save reminder: {e}") from e

        return Reminder(title=title, due_at=due_at, id=row["id"], created_at=row["created_at"])

    async def create(self, title: str, due_at: datetime | None = None) -> str:
        """Save a reminder and return the confirmation text."""
        self.save(title, due_at)
        return confirmation(title, due_at)

    def get_all(self) -> list[Reminder]:
        """All reminders, undated last, soonest first."""
        conn = self._get_connection()
        cursor = conn.execute(
            """
            SELECT id, title, due_at, created_at FROM reminders
            ORDER BY due_at IS NULL, due_at, id
            """
        )
        return [self._row_to_reminder(row) for row in cursor.fetchall()]

    def get_pending(self, now: datetime | None = None) -> list[Reminder]:
        """Reminders that are undated or not yet due."""
        now = now or datetime.now()
        return [r for r in self.get_all() if r.due_at is None or r.due_at > now]

    def delete(self, reminder_id: int) -> bool:
        """Delete a reminder by id. Returns True if one was deleted."""
        conn = self._get_connection()
        cursor = conn.execute("DELETE FROM reminders WHERE id = ?", (reminder_id,))
        conn.commit()
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_reminder(self, row: sqlite3.Row) -> Reminder:
        due_at = row["due_at"]
        return Reminder(
            id=row["id"],
            title=row["title"],
            due_at=datetime.fromisoformat(due_at) if due_at else None,
            created_at=row["created_at"],
        )
