import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

load_dotenv(os.path.join(BASE_DIR, '.env'))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-prod'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///room_booking.db'
    TOKEN_TTL_HOURS = int(os.environ.get('TOKEN_TTL_HOURS', 24))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Booking grid (hours of the day, slot width in minutes)
    WORKING_HOURS_START = 8   # 8 AM
    WORKING_HOURS_END = 16    # 4 PM
    SLOT_STEP_MINUTES = 60

    TIMEZONE = os.environ.get('TIMEZONE', 'UTC')
    ROOMS_FILE = os.environ.get('ROOMS_FILE') or os.path.join(BASE_DIR, 'rooms.json')
    CANCEL_POLICY = os.environ.get('CANCEL_POLICY', 'cancel')  # cancel | delete

    # Notifications: log | smtp | webhook
    NOTIFIER = os.environ.get('NOTIFIER', 'log')
    SMTP_HOST = os.environ.get('SMTP_HOST', '')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', 465))
    SMTP_USER = os.environ.get('SMTP_USER', '')
    SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD', '')
    SMTP_FROM = os.environ.get('SMTP_FROM') or SMTP_USER
    NOTIFY_WEBHOOK_URL = os.environ.get('NOTIFY_WEBHOOK_URL', '')
    NOTIFY_TIMEOUT = 10

    CALENDAR_DOMAIN = os.environ.get('CALENDAR_DOMAIN', 'rooms.local')

class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = 'DEBUG'

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    NOTIFIER = 'log'
    CANCEL_POLICY = 'cancel'
    TIMEZONE = 'UTC'

class ProductionConfig(Config):
    DEBUG = False
    # In prod, rely on env vars strictly
