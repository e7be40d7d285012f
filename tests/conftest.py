import pytest
from datetime import date, datetime
from unittest.mock import patch
from werkzeug.security import generate_password_hash
from app import create_app, db
from app.config import TestingConfig
from app.models import User, Room
from app.utils.decorators import issue_token

BOOKING_DAY = date(2030, 1, 15)
NOW = datetime(2030, 1, 15, 7, 0)

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture(autouse=True)
def frozen_clock():
    with patch('app.utils.clock.now', return_value=NOW) as mock_now:
        yield mock_now

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def rooms(app):
    room_a = Room(name='A', capacity=8, amenities=['Projector'])
    room_b = Room(name='B', capacity=4, amenities=['Whiteboard'])
    room_closed = Room(name='Closed', capacity=4, is_active=False)
    db.session.add_all([room_a, room_b, room_closed])
    db.session.commit()
    return room_a, room_b, room_closed

@pytest.fixture
def users(app):
    alice = User(name='alice', email='alice@test.com', password_hash=generate_password_hash('secret1'), role='user')
    bob = User(name='bob', email='bob@test.com', password_hash=generate_password_hash('secret2'), role='user')
    admin = User(name='admin', email='admin@test.com', password_hash=generate_password_hash('secret3'), role='admin')
    db.session.add_all([alice, bob, admin])
    db.session.commit()
    return alice, bob, admin

@pytest.fixture
def headers(users):
    """Authorization headers keyed by user name."""
    return {u.name: {'Authorization': f'Bearer {issue_token(u)}'} for u in users}
