"""Parsing of typed due times.

Accepts relative expressions ("in 10 minutes", "2 hours"), clock times
("at 3:30 pm", "at 15:30", "at 9 tomorrow") and ISO-8601 timestamps.
"""

import re
from datetime import UTC, datetime, timedelta

_WORD_NUMBERS = {
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
    "ten": "10",
    "fifteen": "15",
    "twenty": "20",
    "thirty": "30",
    "forty-five": "45",
    "sixty": "60",
    "half": "30",  # "half an hour"
}

_RELATIVE = re.compile(
    r"^(?:in\s+)?(\d+)\s*(second|sec|minute|min|hour|hr|day)s?$",
    re.IGNORECASE,
)
_HALF_HOUR = re.compile(r"^(?:in\s+)?30\s+an?\s+hour$", re.IGNORECASE)
_CLOCK = re.compile(
    r"^(?:at\s+)?(\d{1,2})(?:[:.](\d{2}))?\s*(am|pm)?(\s+tomorrow)?$",
    re.IGNORECASE,
)


def _word_to_number(text: str) -> str:
    """Convert word numbers to digits."""
    result = text.lower()
    for word, digit in _WORD_NUMBERS.items():
        result = re.sub(rf"\b{word}\b", digit, result)
    return result


def parse_due_time(text: str, now: datetime | None = None) -> datetime | None:
    """Parse a typed due time into an aware UTC datetime.

    Clock times are read in the local timezone; a time already passed
    today means tomorrow.

    Args:
        text: Time expression.
        now: Reference time (defaults to the current time).

    Returns:
        The due time, or None if the text is not understood.

    Examples:
        >>> parse_due_time("in 10 minutes")
        datetime(...)  # 10 minutes from now
        >>> parse_due_time("at 3:30 pm")
        datetime(...)  # Today (or tomorrow) at 3:30 PM local time
    """
    if not text or not text.strip():
        return None

    if now is None:
        now = datetime.now(UTC)

    raw = text.strip()
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        parsed = None
    if parsed is not None:
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        return parsed.astimezone(UTC)

    text = _word_to_number(raw)

    if _HALF_HOUR.match(text):
        return now + timedelta(minutes=30)

    relative = _RELATIVE.match(text)
    if relative:
        amount = int(relative.group(1))
        unit = relative.group(2).lower()
        if unit in ("second", "sec"):
            return now + timedelta(seconds=amount)
        if unit in ("hour", "hr"):
            return now + timedelta(hours=amount)
        if unit == "day":
            return now + timedelta(days=amount)
        return now + timedelta(minutes=amount)

    clock = _CLOCK.match(text)
    if clock:
        hour = int(clock.group(1))
        minute = int(clock.group(2)) if clock.group(2) else 0
        period = clock.group(3)

        if period:
            if period.lower() == "pm" and hour != 12:
                hour += 12
            elif period.lower() == "am" and hour == 12:
                hour = 0

        if hour > 23 or minute > 59:
            return None

        local_now = now.astimezone()
        result = local_now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if result <= local_now:
            result += timedelta(days=1)
        if clock.group(4) and result.date() == local_now.date():
            result += timedelta(days=1)
        return result.astimezone(UTC)

    return None


def format_due(dt: datetime) -> str:
    """Format a due time in local time, e.g. "Mar 04 2:34 PM"."""
    local_dt = dt.astimezone()
    return f"{local_dt.strftime('%b %d')} {local_dt.strftime('%I:%M %p').lstrip('0')}"


__all__ = [
    "format_due",
    "parse_due_time",
]
