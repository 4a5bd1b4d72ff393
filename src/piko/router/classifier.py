"""Route raw user input to a command."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .time_parser import extract_date_time, extract_task_text

IMAGE_VERBS = ("generate", "create", "make", "draw")

IMAGE_TRIGGERS = [
    "generate image of",
    "create image of",
    "make an image of",
    "draw an image of",
    "/image",
    "generate an image of",
    "create an image of",
    "make image of",
    "draw image of",
    "generate a image of",
    "create a image of",
    "make a image of",
    "draw a image of",
]


@dataclass(frozen=True)
class ReminderCommand:
    title: str
    due_at: datetime | None = None


@dataclass(frozen=True)
class AlarmCommand:
    """Alarm request. ``at`` is None when the time was not understood."""

    at: datetime | None = None


@dataclass(frozen=True)
class ImageRequestCommand:
    prompt: str
    original_text: str


@dataclass(frozen=True)
class PlainChatCommand:
    text: str


Command = Union[ReminderCommand, AlarmCommand, ImageRequestCommand, PlainChatCommand]


def is_reminder(lowered: str) -> bool:
    return "remind" in lowered or "reminder" in lowered


def is_alarm(lowered: str) -> bool:
    return "alarm" in lowered or "wake me" in lowered


def is_image_request(lowered: str) -> bool:
    if lowered.startswith("/image"):
        return True
    return "image" in lowered and any(verb in lowered for verb in IMAGE_VERBS)


def extract_image_prompt(text: str) -> str:
    """Remove the first image trigger phrase found and trim."""
    for trigger in IMAGE_TRIGGERS:
        match = re.search(re.escape(trigger), text, re.IGNORECASE)
        if match:
            text = text[: match.start()] + text[match.end() :]
            break
    return re.sub(r"\s{2,}", " ", text).strip()


def classify(raw_text: str, now: datetime | None = None) -> Command:
    """Classify user input.

    Checks run in priority order: reminder, alarm, image, chat. The
    reference time only affects due dates, never the kind of command.
    """
    lowered = raw_text.lower()

    if is_reminder(lowered):
        return ReminderCommand(
            title=extract_task_text(raw_text),
            due_at=extract_date_time(raw_text, now=now),
        )

    if is_alarm(lowered):
        return AlarmCommand(at=extract_date_time(raw_text, now=now))

    if is_image_request(lowered):
        return ImageRequestCommand(
            prompt=extract_image_prompt(raw_text),
            original_text=raw_text,
        )

    return PlainChatCommand(text=raw_text)
