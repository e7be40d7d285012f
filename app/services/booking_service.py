from datetime import datetime, time as dtime
from flask import current_app
from sqlalchemy import update, func, desc
from sqlalchemy.exc import IntegrityError
from app.models import Booking, RoomDay
from app.models.booking import (
    PENDING, APPROVED, REJECTED, CANCELLED, ACTIVE_STATUSES, TERMINAL_STATUSES, STATUSES
)
from app.extensions import db
from app.services.conflicts import find_conflicts, overlaps
from app.services.exceptions import (
    ConflictError, ForbiddenError, InvalidStatusError, NotFoundError, PastDateError
)
from app.services.notification_service import NotificationService
from app.services.room_service import RoomService
from app.services.slots import SlotGrid, slot_availability, valid_end_times
from app.utils import clock
from app.utils.time_utils import format_display, format_storage, parse_time

ADMIN_STATUSES = (APPROVED, REJECTED)

class BookingService:

    @staticmethod
    def grid() -> SlotGrid:
        return SlotGrid.from_config(current_app.config)

    @staticmethod
    def parse_interval(start_time: str, end_time: str):
        """Parse display or storage times and check the range against the booking grid."""
        start = parse_time(start_time)
        end = parse_time(end_time)
        BookingService.grid().validate(start, end)
        return start, end

    @staticmethod
    def check_not_past(booking_date, start: int):
        starts_at = datetime.combine(booking_date, dtime(*divmod(start, 60)))
        if starts_at < clock.now():
            raise PastDateError("Cannot book a slot in the past.")

    @staticmethod
    def active_bookings(room, booking_date, exclude_id=None):
        """Bookings that currently block the room on that date, in start order."""
        query = Booking.query.filter(
            Booking.room == room,
            Booking.date == booking_date,
            Booking.status.in_(ACTIVE_STATUSES)
        )
        if exclude_id is not None:
            query = query.filter(Booking.id != exclude_id)
        return query.order_by(Booking.time).all()

    @staticmethod
    def load_occupied_intervals(room, booking_date, exclude_id=None):
        return sorted(b.interval for b in BookingService.active_bookings(room, booking_date, exclude_id))

    @staticmethod
    def _lock_room_day(room, booking_date):
        """
        Bump the (room, date) lock row inside the current transaction.
        Must run before the occupied intervals are read.
        """
        stmt = (
            update(RoomDay)
            .where(RoomDay.room == room, RoomDay.date == booking_date)
            .values(version=RoomDay.version + 1)
            .execution_options(synchronize_session=False)
        )
        if db.session.execute(stmt).rowcount:
            return

        try:
            db.session.add(RoomDay(room=room, date=booking_date, version=1))
            db.session.flush()
        except IntegrityError:
            # Another writer created the row first; queue behind its lock
            db.session.rollback()
            db.session.execute(stmt)

    @staticmethod
    def _notify(recipient, subject, body):
        """Fire-and-forget: a failed notification never fails the booking operation."""
        try:
            NotificationService.notify(recipient, subject, body)
        except Exception as e:
            current_app.logger.error(f"Notification to {recipient} failed: {e}")

    @staticmethod
    def _describe(booking):
        start, end = booking.interval
        return f"{booking.room} on {booking.date.isoformat()} from {format_display(start)} to {format_display(end)}"

    @staticmethod
    def create_booking(room, booking_date, start_time, end_time, user_email, user_name):
        """
        Main entry point to book a room. The new booking starts out pending.
        """
        start, end = BookingService.parse_interval(start_time, end_time)
        RoomService.get_active_room(room)
        BookingService.check_not_past(booking_date, start)

        try:
            BookingService._lock_room_day(room, booking_date)
            occupied = BookingService.load_occupied_intervals(room, booking_date)
            conflicts = find_conflicts((start, end), occupied)
            if conflicts:
                raise ConflictError("The requested time slot conflicts with an existing booking.", conflicts)

            booking = Booking(
                room=room,
                date=booking_date,
                time=format_storage(start),
                end_time=format_storage(end),
                user_email=user_email,
                user_name=user_name,
                status=PENDING
            )
            db.session.add(booking)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Booking {booking.id} created: {BookingService._describe(booking)} by {user_email}")
        BookingService._notify(
            user_email,
            "Meeting Room Booking Confirmation",
            f"Hi {user_name},\n\nYour booking for {BookingService._describe(booking)} is pending approval."
        )
        return booking

    @staticmethod
    def edit_booking(booking_id, start_time, end_time, user_email):
        """Move a booking owned by `user_email` to a new time range. Status resets to pending."""
        booking = Booking.query.filter_by(id=booking_id, user_email=user_email).first()
        if not booking:
            raise NotFoundError("Booking not found or not authorized.")
        if booking.status == APPROVED:
            raise ForbiddenError("Approved bookings cannot be edited. Cancel it and book again.")
        if booking.status in TERMINAL_STATUSES:
            raise ForbiddenError(f"A {booking.status} booking cannot be edited.")

        start, end = BookingService.parse_interval(start_time, end_time)
        BookingService.check_not_past(booking.date, start)

        try:
            BookingService._lock_room_day(booking.room, booking.date)
            occupied = BookingService.load_occupied_intervals(booking.room, booking.date, exclude_id=booking.id)
            conflicts = find_conflicts((start, end), occupied)
            if conflicts:
                raise ConflictError("The new time slot conflicts with an existing booking.", conflicts)

            booking.time = format_storage(start)
            booking.end_time = format_storage(end)
            booking.status = PENDING
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Booking {booking.id} edited: {BookingService._describe(booking)}")
        BookingService._notify(
            user_email,
            "Meeting Room Booking Edited",
            f"Your booking has been updated to {BookingService._describe(booking)}. It is now pending approval."
        )
        return booking

    @staticmethod
    def cancel_booking(booking_id, user_email):
        """
        Cancel a booking owned by `user_email`.
        Returns the booking, or None when CANCEL_POLICY is 'delete' and the row was removed.
        Cancelling an already-cancelled booking is a no-op.
        """
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking not found.")
        if booking.user_email != user_email:
            raise ForbiddenError("You do not have permission to cancel this booking.")
        if booking.status == CANCELLED:
            return booking
        if booking.status == REJECTED:
            raise ForbiddenError("A rejected booking cannot be cancelled.")

        description = BookingService._describe(booking)
        hard_delete = current_app.config.get('CANCEL_POLICY') == 'delete'

        try:
            BookingService._lock_room_day(booking.room, booking.date)
            if hard_delete:
                db.session.delete(booking)
                booking = None
            else:
                booking.status = CANCELLED
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Booking {booking_id} {'deleted' if hard_delete else 'cancelled'} by {user_email}")
        BookingService._notify(
            user_email,
            "Meeting Room Booking Cancelled",
            f"Your booking for {description} has been cancelled."
        )
        return booking

    @staticmethod
    def set_status(booking_id, new_status):
        """
        Admin decision on a booking.

        Approving is first-approved-wins: it fails if an overlapping booking is
        already approved, and rejects any overlapping pending bookings.
        """
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking not found.")
        if new_status not in ADMIN_STATUSES:
            raise InvalidStatusError(f"Invalid status value '{new_status}'.")
        if booking.status in TERMINAL_STATUSES:
            raise InvalidStatusError(f"Booking is already {booking.status}.")
        if booking.status == new_status:
            return booking

        auto_rejected = []
        try:
            if new_status == APPROVED:
                BookingService._lock_room_day(booking.room, booking.date)
                others = BookingService.active_bookings(booking.room, booking.date, exclude_id=booking.id)
                clashing = [b for b in others if overlaps(booking.interval, b.interval)]

                approved = [b.interval for b in clashing if b.status == APPROVED]
                if approved:
                    raise ConflictError("An overlapping booking is already approved.", approved)

                for other in clashing:
                    other.status = REJECTED
                    auto_rejected.append(other)

            booking.status = new_status
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Booking {booking.id} set to {new_status}")
        BookingService._notify(
            booking.user_email,
            f"Meeting Room Booking {new_status.capitalize()}",
            f"Your booking for {BookingService._describe(booking)} has been {new_status}."
        )
        for other in auto_rejected:
            current_app.logger.info(f"Booking {other.id} auto-rejected, overlaps approved booking {booking.id}")
            BookingService._notify(
                other.user_email,
                "Meeting Room Booking Rejected",
                f"Your booking for {BookingService._describe(other)} has been rejected: the slot was given to another booking."
            )
        return booking

    @staticmethod
    def get_unavailable_slots(room, booking_date):
        """Occupied bookings for a room/date plus per-slot availability."""
        bookings = BookingService.active_bookings(room, booking_date)

        occupied = [b.interval for b in bookings]
        return {
            'room': room,
            'date': booking_date.isoformat(),
            'bookings': [
                {
                    'id': b.id,
                    'time': b.time,
                    'end_time': b.end_time,
                    'start': format_display(b.interval[0]),
                    'end': format_display(b.interval[1]),
                    'status': b.status
                }
                for b in bookings
            ],
            'slots': slot_availability(BookingService.grid(), occupied)
        }

    @staticmethod
    def get_end_times(room, booking_date, start_time):
        start = parse_time(start_time)
        occupied = BookingService.load_occupied_intervals(room, booking_date)
        return [format_display(end) for end in valid_end_times(start, BookingService.grid(), occupied)]

    @staticmethod
    def get_user_bookings(user_email):
        return Booking.query.filter(
            Booking.user_email == user_email
        ).order_by(Booking.date, Booking.time).all()

    @staticmethod
    def get_approved_bookings(user_email=None):
        query = Booking.query.filter(Booking.status == APPROVED)
        if user_email:
            query = query.filter(Booking.user_email == user_email)
        return query.order_by(Booking.date, Booking.time).all()

    @staticmethod
    def get_active_bookings(user_email):
        return Booking.query.filter(
            Booking.user_email == user_email,
            Booking.status.in_(ACTIVE_STATUSES)
        ).order_by(Booking.date, Booking.time).all()

    @staticmethod
    def get_all_bookings(status=None, booking_date=None):
        query = Booking.query
        if status:
            query = query.filter(Booking.status == status)
        if booking_date:
            query = query.filter(Booking.date == booking_date)
        return query.order_by(Booking.date.desc(), Booking.time).all()

    @staticmethod
    def get_summary():
        """Count bookings per day, newest day first."""
        rows = db.session.query(
            Booking.date, func.count(Booking.id)
        ).group_by(Booking.date).order_by(Booking.date.desc()).all()
        return [{'date': d.isoformat(), 'total': total} for d, total in rows]

    @staticmethod
    def get_stats():
        counts = {status: 0 for status in STATUSES}
        rows = db.session.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        counts.update({status: total for status, total in rows})

        total = func.count(Booking.id).label('total')
        peak = db.session.query(Booking.date, total).group_by(Booking.date).order_by(
            desc('total'), Booking.date.desc()
        ).first()

        return {
            'total_bookings': sum(counts.values()),
            **counts,
            'peak_day': {'date': peak[0].isoformat(), 'total': peak[1]} if peak else None
        }
