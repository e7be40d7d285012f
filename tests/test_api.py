import pytest
from app.models import Booking, Room
from app import db
from tests.conftest import BOOKING_DAY

DAY = BOOKING_DAY.isoformat()


def create(client, headers, start='9:00am', end='10:00am', room='A', day=DAY):
    return client.post('/api/booking/create', json={
        'date': day, 'startTime': start, 'endTime': end, 'room': room
    }, headers=headers)


# --- auth ---

def test_register_and_login(client, app):
    response = client.post('/api/auth/register', json={
        'name': 'carol', 'email': 'carol@test.com', 'password': 'hunter22'
    })
    assert response.status_code == 201
    assert response.get_json()['user']['role'] == 'user'

    duplicate = client.post('/api/auth/register', json={
        'name': 'carol2', 'email': 'carol@test.com', 'password': 'hunter22'
    })
    assert duplicate.status_code == 400

    for identifier in ('carol@test.com', 'carol'):
        login = client.post('/api/auth/login', json={'identifier': identifier, 'password': 'hunter22'})
        assert login.status_code == 200
        assert login.get_json()['token']

    bad = client.post('/api/auth/login', json={'identifier': 'carol', 'password': 'wrong'})
    assert bad.status_code == 401


def test_register_validates_body(client, app):
    response = client.post('/api/auth/register', json={'name': 'dave', 'email': 'not-an-email'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid request body'


def test_token_required(client, rooms):
    assert client.get('/api/booking/rooms').status_code == 401
    bad = client.get('/api/booking/rooms', headers={'Authorization': 'Bearer nope'})
    assert bad.status_code == 401


# --- bookings ---

def test_rooms_lists_active_rooms(client, rooms, headers):
    response = client.get('/api/booking/rooms', headers=headers['alice'])
    assert [r['name'] for r in response.get_json()] == ['A', 'B']


def test_create_booking(client, rooms, headers):
    response = create(client, headers['alice'])
    assert response.status_code == 201
    booking = response.get_json()['booking']
    assert booking['status'] == 'pending'
    assert booking['user_email'] == 'alice@test.com'
    assert booking['time'] == '09:00:00'


def test_create_conflict_returns_409(client, rooms, headers):
    create(client, headers['alice'])
    response = create(client, headers['bob'], start='9:30am', end='10:30am')
    assert response.status_code == 409
    body = response.get_json()
    assert body['code'] == 'conflict'
    assert body['conflicts'] == [{'start': '9:00am', 'end': '10:00am'}]


@pytest.mark.parametrize('start,end,code', [
    ('nine', '10:00am', 'parse_error'),
    ('10:00am', '9:00am', 'invalid_range'),
])
def test_create_reports_specific_errors(client, rooms, headers, start, end, code):
    response = create(client, headers['alice'], start=start, end=end)
    assert response.status_code == 400
    assert response.get_json()['code'] == code


def test_create_past_and_unknown_room(client, rooms, headers):
    past = create(client, headers['alice'], day='2030-01-14')
    assert past.get_json()['code'] == 'past_date'
    missing = create(client, headers['alice'], room='Nowhere')
    assert missing.status_code == 404


def test_create_requires_fields(client, rooms, headers):
    response = client.post('/api/booking/create', json={'date': DAY, 'startTime': '9:00am'}, headers=headers['alice'])
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid request body'


def test_slots_and_end_times(client, rooms, headers):
    create(client, headers['alice'], start='10:00am', end='11:00am')

    slots = client.get(f'/api/booking/slots?date={DAY}&room=A', headers=headers['bob']).get_json()
    assert [b['start'] for b in slots['bookings']] == ['10:00am']
    free = {s['slot']: s['available'] for s in slots['slots']}
    assert free['10:00am'] is False and free['9:00am'] is True

    ends = client.get(f'/api/booking/end-times?date={DAY}&room=A&start=8:00am', headers=headers['bob'])
    assert ends.get_json()['end_times'] == ['9:00am', '10:00am']

    missing = client.get('/api/booking/slots?room=A', headers=headers['bob'])
    assert missing.status_code == 400


def test_edit_booking(client, rooms, headers):
    booking_id = create(client, headers['alice']).get_json()['booking']['id']

    not_owner = client.post('/api/booking/edit', json={
        'id': booking_id, 'newTime': '1:00pm', 'newEndTime': '2:00pm'
    }, headers=headers['bob'])
    assert not_owner.status_code == 404

    response = client.post('/api/booking/edit', json={
        'id': booking_id, 'newTime': '1:00pm', 'newEndTime': '2:00pm'
    }, headers=headers['alice'])
    assert response.status_code == 200
    assert response.get_json()['booking']['start'] == '1:00pm'


def test_cancel_booking(client, rooms, headers):
    booking_id = create(client, headers['alice']).get_json()['booking']['id']

    assert client.delete(f'/api/booking/{booking_id}', headers=headers['bob']).status_code == 403
    assert client.delete('/api/booking/9999', headers=headers['alice']).status_code == 404

    for _ in range(2):
        response = client.delete(f'/api/booking/{booking_id}', headers=headers['alice'])
        assert response.status_code == 200
        assert response.get_json()['booking']['status'] == 'cancelled'


def test_user_bookings_and_approved(client, rooms, headers):
    booking_id = create(client, headers['alice']).get_json()['booking']['id']
    create(client, headers['bob'], start='11:00am', end='12:00pm')
    client.post('/api/admin/update-status', json={'id': booking_id, 'status': 'approved'}, headers=headers['admin'])

    mine = client.get('/api/booking/user-bookings', headers=headers['bob']).get_json()
    assert [b['start'] for b in mine] == ['11:00am']

    approved = client.get('/api/booking/approved', headers=headers['bob']).get_json()
    assert [b['id'] for b in approved] == [booking_id]
    assert client.get('/api/booking/approved?mine=1', headers=headers['bob']).get_json() == []


def test_calendar_export(client, rooms, headers):
    create(client, headers['alice'])
    response = client.get('/api/booking/calendar.ics', headers=headers['alice'])
    assert response.status_code == 200
    assert response.mimetype == 'text/calendar'
    assert b'BEGIN:VEVENT' in response.data


# --- admin ---

def test_admin_routes_require_admin(client, rooms, headers):
    assert client.get('/api/admin/bookings', headers=headers['alice']).status_code == 403
    response = client.post('/api/admin/update-status', json={'id': 1, 'status': 'approved'}, headers=headers['alice'])
    assert response.status_code == 403


def test_admin_update_status(client, rooms, headers):
    booking_id = create(client, headers['alice']).get_json()['booking']['id']

    invalid = client.post('/api/admin/update-status', json={'id': booking_id, 'status': 'done'}, headers=headers['admin'])
    assert invalid.status_code == 400
    assert invalid.get_json()['code'] == 'invalid_status'

    missing = client.post('/api/admin/update-status', json={'id': 9999, 'status': 'approved'}, headers=headers['admin'])
    assert missing.status_code == 404

    response = client.post('/api/admin/update-status', json={'id': booking_id, 'status': 'approved'}, headers=headers['admin'])
    assert response.status_code == 200
    assert response.get_json()['booking']['status'] == 'approved'

    edit = client.post('/api/booking/edit', json={
        'id': booking_id, 'newTime': '1:00pm', 'newEndTime': '2:00pm'
    }, headers=headers['alice'])
    assert edit.status_code == 403


def test_admin_listing_summary_stats(client, rooms, headers):
    create(client, headers['alice'])
    create(client, headers['bob'], start='11:00am', end='12:00pm')

    listing = client.get(f'/api/admin/bookings?date={DAY}&status=pending', headers=headers['admin']).get_json()
    assert len(listing) == 2

    summary = client.get('/api/admin/summary', headers=headers['admin']).get_json()
    assert summary == [{'date': DAY, 'total': 2}]

    stats = client.get('/api/admin/stats', headers=headers['admin']).get_json()
    assert stats['total_bookings'] == 2
    assert stats['pending'] == 2


def test_admin_room_management(client, rooms, headers):
    created = client.post('/api/admin/rooms', json={'name': 'C', 'capacity': 12, 'amenities': ['TV']}, headers=headers['admin'])
    assert created.status_code == 201
    room_id = created.get_json()['room']['id']

    duplicate = client.post('/api/admin/rooms', json={'name': 'C', 'capacity': 2}, headers=headers['admin'])
    assert duplicate.status_code == 400

    updated = client.put(f'/api/admin/rooms/{room_id}', json={'capacity': 14}, headers=headers['admin'])
    assert updated.get_json()['room']['capacity'] == 14

    deleted = client.delete(f'/api/admin/rooms/{room_id}', headers=headers['admin'])
    assert deleted.get_json()['message'] == 'Room deleted'
    assert db.session.get(Room, room_id) is None


def test_admin_rename_and_delete_booked_room(client, rooms, headers):
    room_a = rooms[0]
    create(client, headers['alice'])

    renamed = client.put(f'/api/admin/rooms/{room_a.id}', json={'name': 'Atlas'}, headers=headers['admin'])
    assert renamed.status_code == 200
    assert Booking.query.one().room == 'Atlas'

    response = client.delete(f'/api/admin/rooms/{room_a.id}', headers=headers['admin'])
    assert response.status_code == 200
    assert db.session.get(Room, room_a.id).is_active is False
