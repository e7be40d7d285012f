from flask import Blueprint, request, jsonify, current_app, Response
from app.extensions import db
from app.schemas import BookingCreateRequest, BookingEditRequest
from app.services.booking_service import BookingService
from app.services.calendar_service import CalendarService
from app.services.exceptions import BookingError
from app.services.room_service import RoomService
from app.utils.decorators import token_required, validate_body
from datetime import date
import traceback

bookings_bp = Blueprint('bookings', __name__)

def server_error(e):
    db.session.rollback()
    current_app.logger.error(f"Unhandled booking error: {e}\n{traceback.format_exc()}")
    return jsonify({'error': 'Server Error'}), 500

def parse_date_arg(name='date'):
    value = request.args.get(name)
    if not value:
        return None
    return date.fromisoformat(value)

@bookings_bp.route('/slots', methods=['GET'])
@token_required
def get_slots(current_user):
    room = request.args.get('room')
    try:
        booking_date = parse_date_arg()
    except ValueError:
        return jsonify({'error': 'Invalid date, expected YYYY-MM-DD'}), 400
    if not booking_date or not room:
        return jsonify({'error': 'Missing date or room'}), 400

    return jsonify(BookingService.get_unavailable_slots(room, booking_date))

@bookings_bp.route('/end-times', methods=['GET'])
@token_required
def get_end_times(current_user):
    room = request.args.get('room')
    start = request.args.get('start')
    try:
        booking_date = parse_date_arg()
    except ValueError:
        return jsonify({'error': 'Invalid date, expected YYYY-MM-DD'}), 400
    if not booking_date or not room or not start:
        return jsonify({'error': 'Missing date, room or start'}), 400

    try:
        end_times = BookingService.get_end_times(room, booking_date, start)
    except BookingError as e:
        return jsonify(e.to_dict()), e.status_code
    return jsonify({'start': start, 'end_times': end_times})

@bookings_bp.route('/create', methods=['POST'])
@token_required
@validate_body(BookingCreateRequest)
def create_booking(current_user, payload):
    try:
        booking = BookingService.create_booking(
            room=payload.room,
            booking_date=payload.booking_date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            user_email=current_user.email,
            user_name=current_user.name
        )
        return jsonify({'message': 'Booking created and pending approval', 'booking': booking.to_dict()}), 201
    except BookingError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return server_error(e)

@bookings_bp.route('/edit', methods=['POST'])
@token_required
@validate_body(BookingEditRequest)
def edit_booking(current_user, payload):
    try:
        booking = BookingService.edit_booking(
            booking_id=payload.id,
            start_time=payload.new_time,
            end_time=payload.new_end_time,
            user_email=current_user.email
        )
        return jsonify({'message': 'Booking updated and pending approval', 'booking': booking.to_dict()}), 200
    except BookingError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return server_error(e)

@bookings_bp.route('/<int:booking_id>', methods=['DELETE'])
@token_required
def cancel_booking(current_user, booking_id):
    try:
        booking = BookingService.cancel_booking(booking_id, current_user.email)
    except BookingError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return server_error(e)

    if booking is None:
        return jsonify({'message': 'Booking deleted successfully'}), 200
    return jsonify({'message': 'Booking cancelled successfully', 'booking': booking.to_dict()}), 200

@bookings_bp.route('/user-bookings', methods=['GET'])
@token_required
def get_user_bookings(current_user):
    bookings = BookingService.get_user_bookings(current_user.email)
    return jsonify([b.to_dict() for b in bookings])

@bookings_bp.route('/approved', methods=['GET'])
@token_required
def get_approved_bookings(current_user):
    mine = request.args.get('mine') in ('1', 'true')
    bookings = BookingService.get_approved_bookings(current_user.email if mine else None)
    return jsonify([b.to_dict() for b in bookings])

@bookings_bp.route('/rooms', methods=['GET'])
@token_required
def get_rooms(current_user):
    return jsonify([r.to_dict() for r in RoomService.list_rooms()])

@bookings_bp.route('/calendar.ics', methods=['GET'])
@token_required
def export_calendar(current_user):
    bookings = BookingService.get_active_bookings(current_user.email)
    ics = CalendarService.export_bookings(
        bookings,
        tz_name=current_app.config['TIMEZONE'],
        domain=current_app.config['CALENDAR_DOMAIN']
    )
    return Response(ics, mimetype='text/calendar')
