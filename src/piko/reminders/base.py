"""Reminder backend interface."""

from datetime import datetime
from typing import Protocol, runtime_checkable


def format_due(due_at: datetime) -> str:
    """Human-readable date and time, e.g. "Oct 19, 2026 at 5:00 PM"."""
    return f"{due_at:%b} {due_at.day}, {due_at.year} at {due_at.hour % 12 or 12}:{due_at:%M %p}"


def confirmation(title: str, due_at: datetime | None) -> str:
    if due_at is not None:
        return f'✅ Reminder set: "{title}" for {format_due(due_at)}'
    return f'✅ Reminder created: "{title}"'


@runtime_checkable
class ReminderService(Protocol):
    """Creates reminders on behalf of the user."""

    async def create(self, title: str, due_at: datetime | None = None) -> str:
        """Create a reminder and return a confirmation message.

        Raises:
            PermissionDeniedError: Access to reminders was refused.
            ReminderStorageError: The reminder could not be saved.
        """
        ...
