import os
import click
from flask import Flask
from app.config import DevelopmentConfig
from app.extensions import db, migrate

def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Register models with the metadata
    from app import models  # noqa: F401

    # Register Blueprints
    from app.api.routes.auth import auth_bp
    from app.api.routes.bookings import bookings_bp
    from app.api.routes.admin import admin_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(bookings_bp, url_prefix='/api/booking')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.route('/health')
    def health():
        return {"status": "ok", "app": "RoomBooking"}

    @app.cli.command('sync-rooms')
    @click.argument('path', required=False)
    def sync_rooms(path):
        """Load the room list from ROOMS_FILE (or PATH) into the database."""
        from app.services.room_service import RoomService

        path = path or app.config['ROOMS_FILE']
        if not os.path.exists(path):
            raise click.ClickException(f"Rooms file not found: {path}")
        count = RoomService.sync_from_file(path)
        click.echo(f"{count} rooms synced.")

    return app
