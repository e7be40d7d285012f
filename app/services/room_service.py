import json

from flask import current_app

from app.extensions import db
from app.models import Booking, Room, RoomDay
from app.services.exceptions import NotFoundError


class RoomService:

    @staticmethod
    def list_rooms(active_only=True):
        query = Room.query
        if active_only:
            query = query.filter(Room.is_active == True)
        return query.order_by(Room.name).all()

    @staticmethod
    def get_active_room(name):
        room = Room.query.filter_by(name=name, is_active=True).first()
        if not room:
            raise NotFoundError(f"Room '{name}' not found.")
        return room

    @staticmethod
    def sync_from_file(path):
        """
        Upsert rooms from a JSON list of {name, capacity, amenities}.
        Returns the number of rooms created or updated.
        """
        with open(path, encoding='utf-8') as fh:
            rooms_data = json.load(fh)

        count = 0
        for r_data in rooms_data:
            room = Room.query.filter_by(name=r_data['name']).first()
            if room is None:
                room = Room(name=r_data['name'])
                db.session.add(room)
            room.capacity = r_data.get('capacity', 1)
            room.amenities = r_data.get('amenities', [])
            room.is_active = r_data.get('is_active', True)
            count += 1

        db.session.commit()
        current_app.logger.info(f"Synced {count} rooms from {path}")
        return count

    @staticmethod
    def delete_room(room):
        """Hard delete when the room was never booked, otherwise deactivate to keep history."""
        if Booking.query.filter_by(room=room.name).first():
            room.is_active = False
            db.session.commit()
            return False

        db.session.delete(room)
        db.session.commit()
        return True

    @staticmethod
    def rename_room(room, new_name):
        """
        Rename a room. Bookings and (room, date) lock rows reference rooms by
        name, so both move with it in the same transaction.
        """
        old_name = room.name
        # Lock rows left behind by an earlier room of the same name
        RoomDay.query.filter_by(room=new_name).delete(synchronize_session=False)
        RoomDay.query.filter_by(room=old_name).update({'room': new_name}, synchronize_session=False)
        Booking.query.filter_by(room=old_name).update({'room': new_name}, synchronize_session=False)
        room.name = new_name
        current_app.logger.info(f"Room '{old_name}' renamed to '{new_name}'")
