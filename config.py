import os
from datetime import timedelta

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'secret-key-goes-here')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///mat_tracker.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Shared admin password; leave empty to disable login entirely
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', '')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    SESSION_COOKIE_NAME = 'mat-tracker-session'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    REMEMBER_COOKIE_DURATION = timedelta(days=7)

    BACKUP_FOLDER = os.path.join(os.getcwd(), 'backups')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    ADMIN_PASSWORD = 'mat-secret'
    SESSION_COOKIE_SECURE = False
