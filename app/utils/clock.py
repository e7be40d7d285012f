from datetime import datetime

import pytz
from flask import current_app


def now() -> datetime:
    """Current wall-clock time in the configured TIMEZONE, as a naive datetime.

    Bookings store local dates and times without tzinfo, so comparisons
    against them use the same naive local form. Patched in tests.
    """
    tz = pytz.timezone(current_app.config.get('TIMEZONE', 'UTC'))
    return datetime.now(tz).replace(tzinfo=None)
