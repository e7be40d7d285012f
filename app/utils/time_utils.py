"""
Conversions between the three time forms used by the app:
display ("8:00am"), storage ("08:00:00") and minutes since midnight.
"""
import re

from app.services.exceptions import ParseError

MINUTES_PER_DAY = 24 * 60

DISPLAY_RE = re.compile(r'^([1-9]\d?):(\d{2})(am|pm)$', re.IGNORECASE)
STORAGE_RE = re.compile(r'^(\d{2}):(\d{2})(?::(\d{2}))?$')


def parse_display_time(s: str) -> int:
    """Parse a 12-hour clock string like '8:00am' or '12:30PM'."""
    match = DISPLAY_RE.match(s.strip()) if isinstance(s, str) else None
    if not match:
        raise ParseError(f"Invalid time '{s}', expected H:MMam/pm.")

    hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3).lower()
    if not 1 <= hour <= 12 or minute > 59:
        raise ParseError(f"Invalid time '{s}', hour or minute out of range.")

    # 12am is midnight, 12pm is noon
    hour = hour % 12
    if period == 'pm':
        hour += 12
    return hour * 60 + minute


def parse_storage_time(s: str) -> int:
    """Parse a 24-hour 'HH:MM' or 'HH:MM:SS' string. Seconds are dropped."""
    match = STORAGE_RE.match(s.strip()) if isinstance(s, str) else None
    if not match:
        raise ParseError(f"Invalid time '{s}', expected HH:MM or HH:MM:SS.")

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise ParseError(f"Invalid time '{s}', field out of range.")
    return hour * 60 + minute


def parse_time(s: str) -> int:
    """Accept either form; the am/pm suffix decides which parser is used."""
    if isinstance(s, str) and s.strip().lower().endswith(('am', 'pm')):
        return parse_display_time(s)
    return parse_storage_time(s)


def _check_minutes(minutes):
    if not isinstance(minutes, int) or not 0 <= minutes < MINUTES_PER_DAY:
        raise ParseError(f"Minutes of day out of range: {minutes!r}")


def format_display(minutes: int) -> str:
    _check_minutes(minutes)
    hour, minute = divmod(minutes, 60)
    period = 'pm' if hour >= 12 else 'am'
    hour = hour % 12 or 12
    return f"{hour}:{minute:02d}{period}"


def format_storage(minutes: int) -> str:
    _check_minutes(minutes)
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}:00"


def normalize_display(s: str) -> str:
    return format_display(parse_display_time(s))


def normalize_storage(s: str) -> str:
    return format_storage(parse_storage_time(s))
