from app.extensions import db
from app.utils.time_utils import format_display, parse_storage_time
from datetime import datetime

PENDING = 'pending'
APPROVED = 'approved'
REJECTED = 'rejected'
CANCELLED = 'cancelled'

STATUSES = (PENDING, APPROVED, REJECTED, CANCELLED)
# Statuses whose interval blocks the room
ACTIVE_STATUSES = (PENDING, APPROVED)
TERMINAL_STATUSES = (REJECTED, CANCELLED)

class Booking(db.Model):
    __tablename__ = 'bookings'
    __table_args__ = (
        db.Index('ix_bookings_room_date', 'room', 'date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    room = db.Column(db.String(64), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)

    # 24-hour storage form, HH:MM:SS
    time = db.Column(db.String(8), nullable=False)
    end_time = db.Column(db.String(8), nullable=False)

    user_email = db.Column(db.String(120), nullable=False, index=True)
    user_name = db.Column(db.String(120), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=PENDING)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def interval(self):
        return parse_storage_time(self.time), parse_storage_time(self.end_time)

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    def to_dict(self):
        start, end = self.interval
        return {
            'id': self.id,
            'room': self.room,
            'date': self.date.isoformat(),
            'time': self.time,
            'end_time': self.end_time,
            'start': format_display(start),
            'end': format_display(end),
            'user_email': self.user_email,
            'user_name': self.user_name,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f"<Booking {self.id} {self.room} {self.date} {self.time}-{self.end_time} {self.status}>"
