"""Extract due times and task descriptions from natural-language text.

Supported expressions, tried in this order (only the first match is used):

    in 10 minutes / after 10 minutes   -> now + 10 minutes
    in 2 hours / after 2 hours         -> now + 2 hours
    at 5pm / at 5:30pm / at 17:30      -> today at that time, or tomorrow
    5pm / 6:30am                       if it has already passed
    tomorrow at 9am                    -> tomorrow at that time

"tomorrow" on its own does not produce a time, and neither does an
out-of-range reading such as "25pm" or "in 99999999999 minutes".
"""

import logging
import re
from datetime import datetime, timedelta

from ..errors import ParseFailure

logger = logging.getLogger(__name__)

MINUTE_PATTERNS = [
    re.compile(r"in (\d+) minutes?"),
    re.compile(r"after (\d+) minutes?"),
]

HOUR_PATTERNS = [
    re.compile(r"in (\d+) hours?"),
    re.compile(r"after (\d+) hours?"),
]

# Order matters: "at 5pm" must win over the bare "5pm" form, and "6:30am"
# must not be read as a bare "30am".
CLOCK_PATTERNS = [
    re.compile(r"at (?P<hour>\d{1,2})\s*(?P<period>am|pm)\b"),
    re.compile(r"at (?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<period>am|pm)?\b"),
    re.compile(r"\b(?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<period>am|pm)\b"),
    re.compile(r"(?<!:)\b(?P<hour>\d{1,2})\s*(?P<period>am|pm)\b"),
]

TOMORROW_PATTERN = re.compile(r"\btomorrow\b")

REMINDER_TRIGGERS = [
    "set a reminder to",
    "set reminder to",
    "remind me to",
    "reminder to",
    "remind me",
    "set reminder",
]

TIME_EXPRESSION_PATTERNS = [
    re.compile(r"\bin \d+ (minutes?|hours?)\b", re.IGNORECASE),
    re.compile(r"\bafter \d+ (minutes?|hours?)\b", re.IGNORECASE),
    re.compile(r"\bat \d{1,2}(:\d{2})?\s*(am|pm)?\b", re.IGNORECASE),
    re.compile(r"\b\d{1,2}:\d{2}\s*(am|pm)\b", re.IGNORECASE),
    re.compile(r"(?<!:)\b\d{1,2}\s*(am|pm)\b", re.IGNORECASE),
    re.compile(r"\btomorrow\b", re.IGNORECASE),
]


def _first_int(patterns: list[re.Pattern[str]], text: str) -> int | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def _shift(moment: datetime, **delta: int) -> datetime:
    try:
        return moment + timedelta(**delta)
    except OverflowError as e:
        raise ParseFailure(f"Time offset out of range: {delta}") from e


def to_24_hour(hour: int, period: str | None) -> int:
    """Convert a 12-hour clock reading to 24-hour.

    Hours are not range checked here; callers reject values past 23.
    """
    if period == "pm" and hour < 12:
        return hour + 12
    if period == "am" and hour == 12:
        return 0
    return hour


def parse_clock_time(text: str) -> tuple[int, int] | None:
    """Return the first explicit (hour, minute) in lowercased text.

    Raises:
        ParseFailure: If the reading is out of range, e.g. "25pm".
    """
    for pattern in CLOCK_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        groups = match.groupdict()
        hour = to_24_hour(int(groups["hour"]), groups.get("period"))
        minute = int(groups.get("minute") or 0)
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ParseFailure(f"Invalid clock time: {match.group(0)!r}")
        return hour, minute

    return None


def extract_clock_time(text: str) -> tuple[int, int] | None:
    """Like parse_clock_time, but malformed readings give None."""
    try:
        return parse_clock_time(text)
    except ParseFailure:
        return None


def _resolve(text: str, now: datetime) -> datetime | None:
    minutes = _first_int(MINUTE_PATTERNS, text)
    if minutes is not None:
        return _shift(now, minutes=minutes)

    hours = _first_int(HOUR_PATTERNS, text)
    if hours is not None:
        return _shift(now, hours=hours)

    clock = parse_clock_time(text)
    if clock is None:
        return None

    hour, minute = clock
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)

    if TOMORROW_PATTERN.search(text):
        return _shift(candidate, days=1)

    if candidate > now:
        return candidate
    return _shift(candidate, days=1)


def extract_date_time(text: str, now: datetime | None = None) -> datetime | None:
    """Resolve the first time expression in text to a datetime.

    Args:
        text: Free-form user input.
        now: Reference time. Defaults to the current local time.

    Returns:
        The resolved datetime, or None when no expression is understood.
    """
    if now is None:
        now = datetime.now()

    try:
        return _resolve(text.lower(), now)
    except ParseFailure as e:
        logger.debug("Ignoring time expression: %s", e)
        return None


def extract_task_text(text: str) -> str:
    """Strip reminder triggers and time expressions, leaving the task.

    Only the first trigger phrase found (in list order) is removed; every
    time expression is removed. The result may be empty.
    """
    cleaned = text

    for trigger in REMINDER_TRIGGERS:
        match = re.search(re.escape(trigger), cleaned, re.IGNORECASE)
        if match:
            cleaned = cleaned[: match.start()] + cleaned[match.end() :]
            break

    for pattern in TIME_EXPRESSION_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    return re.sub(r"\s{2,}", " ", cleaned).strip()
