from app.extensions import db

class RoomDay(db.Model):
    """
    Lock row for one room on one date.

    Every booking mutation bumps `version` before reading the occupied
    intervals, so check-then-write sequences for the same room and day run
    one after another.
    """
    __tablename__ = 'room_days'
    __table_args__ = (
        db.UniqueConstraint('room', 'date', name='uq_room_day'),
    )

    id = db.Column(db.Integer, primary_key=True)
    room = db.Column(db.String(64), nullable=False)
    date = db.Column(db.Date, nullable=False)
    version = db.Column(db.Integer, nullable=False, default=0)
