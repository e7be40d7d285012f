"""
Errors raised by the booking engine.
Raised in the services and turned into JSON responses by the route handlers.
"""


class BookingError(Exception):
    """Base class for all booking engine errors."""
    code = 'booking_error'
    status_code = 400

    def to_dict(self):
        return {'error': str(self), 'code': self.code}


class ParseError(BookingError):
    """Raised when a time string is not in display or storage form."""
    code = 'parse_error'


class InvalidRangeError(BookingError):
    """Raised when start >= end, or the interval leaves the booking grid."""
    code = 'invalid_range'


class PastDateError(BookingError):
    """Raised when the requested start lies before the current time."""
    code = 'past_date'


class InvalidStatusError(BookingError):
    """Raised when an admin sets a status that is not allowed."""
    code = 'invalid_status'


class ForbiddenError(BookingError):
    """Raised when the requester may not act on the booking."""
    code = 'forbidden'
    status_code = 403


class NotFoundError(BookingError):
    """Raised when a booking or room does not exist."""
    code = 'not_found'
    status_code = 404


class ConflictError(BookingError):
    """Raised when the candidate interval overlaps an occupied interval."""
    code = 'conflict'
    status_code = 409

    def __init__(self, message, conflicts=None):
        super().__init__(message)
        self.conflicts = list(conflicts or [])

    def to_dict(self):
        from app.utils.time_utils import format_display

        payload = super().to_dict()
        payload['conflicts'] = [
            {'start': format_display(start), 'end': format_display(end)}
            for start, end in self.conflicts
        ]
        return payload
