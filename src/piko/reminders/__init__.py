"""Reminder creation."""

from .base import ReminderService, confirmation, format_due
from .store import Reminder, ReminderStore

__all__ = ["Reminder", "ReminderService", "ReminderStore", "confirmation", "format_due"]
