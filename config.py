import os


def _flag(name, default):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_key')
    ENV = os.getenv('APP_ENV', 'development')

    # memory | sql
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'memory')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///transit.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_NAME = os.getenv('SESSION_COOKIE_NAME', 'transit.sid')
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_TTL = int(os.getenv('SESSION_TTL', 24 * 60 * 60))
    SESSION_SWEEP_INTERVAL = int(os.getenv('SESSION_SWEEP_INTERVAL', 60 * 60))

    SEED_REFERENCE_DATA = _flag('SEED_REFERENCE_DATA', 'true')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD', 'admin123')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE')
