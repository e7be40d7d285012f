from flask import Blueprint, request, jsonify, current_app
from app.utils.decorators import token_required, admin_required, validate_body
from app.models import Room
from app.extensions import db
from app.schemas import StatusUpdateRequest, RoomRequest, RoomUpdateRequest
from app.services.booking_service import BookingService
from app.services.exceptions import BookingError
from app.services.room_service import RoomService
from datetime import date
import traceback

admin_bp = Blueprint('admin', __name__)

# --- BOOKINGS ---

@admin_bp.route('/bookings', methods=['GET'])
@token_required
@admin_required
def get_bookings(current_user):
    booking_date = request.args.get('date')
    try:
        booking_date = date.fromisoformat(booking_date) if booking_date else None
    except ValueError:
        return jsonify({'error': 'Invalid date, expected YYYY-MM-DD'}), 400

    bookings = BookingService.get_all_bookings(request.args.get('status'), booking_date)
    return jsonify([b.to_dict() for b in bookings]), 200

@admin_bp.route('/update-status', methods=['POST'])
@token_required
@admin_required
@validate_body(StatusUpdateRequest)
def update_status(current_user, payload):
    try:
        booking = BookingService.set_status(payload.id, payload.status)
        return jsonify({'message': 'Status updated successfully', 'booking': booking.to_dict()}), 200
    except BookingError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating booking status: {e}\n{traceback.format_exc()}")
        return jsonify({'error': 'Failed to update booking status'}), 500

@admin_bp.route('/summary', methods=['GET'])
@token_required
@admin_required
def get_summary(current_user):
    return jsonify(BookingService.get_summary()), 200

@admin_bp.route('/stats', methods=['GET'])
@token_required
@admin_required
def get_stats(current_user):
    return jsonify(BookingService.get_stats()), 200

# --- ROOMS MANAGEMENT ---

@admin_bp.route('/rooms', methods=['GET'])
@token_required
@admin_required
def get_rooms(current_user):
    return jsonify([r.to_dict() for r in RoomService.list_rooms(active_only=False)]), 200

@admin_bp.route('/rooms', methods=['POST'])
@token_required
@admin_required
@validate_body(RoomRequest)
def create_room(current_user, payload):
    if Room.query.filter_by(name=payload.name).first():
        return jsonify({'error': 'Room name already exists'}), 400

    new_room = Room(
        name=payload.name,
        capacity=payload.capacity,
        amenities=payload.amenities,
        is_active=payload.is_active
    )
    db.session.add(new_room)
    db.session.commit()
    return jsonify({'message': 'Room created', 'room': new_room.to_dict()}), 201

@admin_bp.route('/rooms/<int:room_id>', methods=['PUT'])
@token_required
@admin_required
@validate_body(RoomUpdateRequest)
def update_room(current_user, room_id, payload):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify({'error': 'Room not found'}), 404

    if payload.name is not None and payload.name != room.name:
        if Room.query.filter_by(name=payload.name).first():
            return jsonify({'error': 'Room name already exists'}), 400
        RoomService.rename_room(room, payload.name)
    if payload.capacity is not None:
        room.capacity = payload.capacity
    if payload.amenities is not None:
        room.amenities = payload.amenities
    if payload.is_active is not None:
        room.is_active = payload.is_active

    db.session.commit()
    return jsonify({'message': 'Room updated', 'room': room.to_dict()}), 200

@admin_bp.route('/rooms/<int:room_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_room(current_user, room_id):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify({'error': 'Room not found'}), 404

    if RoomService.delete_room(room):
        return jsonify({'message': 'Room deleted'}), 200
    return jsonify({'message': 'Room has bookings, deactivated instead'}), 200
