from icalendar import Calendar, Event
from datetime import datetime, time as dtime
import pytz
from app.models.booking import APPROVED

class CalendarService:
    @staticmethod
    def export_bookings(bookings, tz_name='UTC', domain='rooms.local'):
        """
        Builds an iCalendar document with one VEVENT per booking.
        Booking times are local to `tz_name`; pending bookings are TENTATIVE.
        Returns the serialized calendar as bytes.
        """
        tz = pytz.timezone(tz_name)

        cal = Calendar()
        cal.add('prodid', '-//Meeting Room Booking//EN')
        cal.add('version', '2.0')

        for booking in bookings:
            start, end = booking.interval

            event = Event()
            event.add('uid', f"booking-{booking.id}@{domain}")
            event.add('summary', f"{booking.room} booking")
            event.add('location', booking.room)
            event.add('dtstart', tz.localize(datetime.combine(booking.date, dtime(*divmod(start, 60)))))
            event.add('dtend', tz.localize(datetime.combine(booking.date, dtime(*divmod(end, 60)))))
            event.add('dtstamp', datetime.now(pytz.utc))
            event.add('status', 'CONFIRMED' if booking.status == APPROVED else 'TENTATIVE')
            event.add('organizer', f"mailto:{booking.user_email}")
            cal.add_component(event)

        return cal.to_ical()
