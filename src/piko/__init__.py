"""Piko: a small chat assistant with reminders, alarms and image requests."""

__version__ = "0.1.0"
