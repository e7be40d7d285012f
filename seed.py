import os
from app import create_app, db
from app.models import User
from app.services.room_service import RoomService
from werkzeug.security import generate_password_hash

app = create_app()

with app.app_context():
    db.create_all()

    # Create Admin
    if not User.query.filter_by(email='admin@rooms.local').first():
        admin = User(
            name='admin',
            email='admin@rooms.local',
            password_hash=generate_password_hash(os.environ.get('ADMIN_PASSWORD', 'password')),
            role='admin'
        )
        db.session.add(admin)
        db.session.commit()
        print("Admin created (admin@rooms.local)")

    # Rooms come from ROOMS_FILE
    count = RoomService.sync_from_file(app.config['ROOMS_FILE'])
    print(f"{count} rooms synced from {app.config['ROOMS_FILE']}.")
    print("Database seeded successfully.")
