"""
Application Configuration
Handles environment-specific settings
"""

import os


def database_url():
    """DATABASE_URL with the legacy postgres:// scheme rewritten for SQLAlchemy"""
    url = os.getenv("DATABASE_URL", "postgresql+psycopg2://postgres@localhost:5432/testdesk")
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    """Base configuration"""

    SECRET_KEY = os.getenv("SECRET_KEY", "testdesk-dev-key")

    # ================= DATABASE =================
    SQLALCHEMY_DATABASE_URI = database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    SESSION_COOKIE_SAMESITE = "Lax"

    # ================= SOCKET.IO =================
    SOCKETIO_ASYNC_MODE = "threading"
    SOCKETIO_CORS_ALLOWED_ORIGINS = "*"
    # Run each session countdown on a Socket.IO background task
    START_SESSION_TIMERS = True

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # ================= COURSES & TESTS =================
    DEFAULT_TIME_LIMIT_MINUTES = int(os.getenv("DEFAULT_TIME_LIMIT_MINUTES", 30))
    REGISTRATION_CODE_LENGTH = 6
    MIN_PASSWORD_LENGTH = 6


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    """In-memory SQLite, no background timers"""
    TESTING = True
    SECRET_KEY = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    START_SESSION_TIMERS = False


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}


def get_config():
    """Return config class based on FLASK_ENV"""
    env = os.getenv("FLASK_ENV", "development").lower()
    return config.get(env, config["default"])
