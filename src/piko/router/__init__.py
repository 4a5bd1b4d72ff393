"""Command routing and time parsing."""

from .classifier import (
    AlarmCommand,
    Command,
    ImageRequestCommand,
    PlainChatCommand,
    ReminderCommand,
    classify,
    extract_image_prompt,
)
from .time_parser import extract_date_time, extract_task_text

__all__ = [
    "AlarmCommand",
    "Command",
    "ImageRequestCommand",
    "PlainChatCommand",
    "ReminderCommand",
    "classify",
    "extract_date_time",
    "extract_image_prompt",
    "extract_task_text",
]
