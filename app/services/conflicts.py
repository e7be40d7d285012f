"""Overlap checks between booking intervals.

Intervals are (start, end) pairs of minutes since midnight and are half-open:
[start, end). A booking ending at 10:00 does not conflict with one starting
at 10:00.
"""


def overlaps(a, b) -> bool:
    """True iff a.start < b.end and b.start < a.end."""
    return a[0] < b[1] and b[0] < a[1]


def has_conflict(candidate, existing) -> bool:
    return any(overlaps(candidate, interval) for interval in existing)


def find_conflicts(candidate, existing) -> list:
    """Return the intervals from `existing` that overlap `candidate`."""
    return [interval for interval in existing if overlaps(candidate, interval)]
