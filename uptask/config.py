"""
UpTask API
Configuration classes for the app factory.

``create_app`` picks one by name (argument, else APP_ENV, else
"development") and loads an instance of it:

    app.config.from_object(config[name]())

Instantiating lets ``ProductionConfig`` refuse to start with missing
secrets instead of silently falling back to development values.
"""

import os
import secrets

ROOT_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))


def _env_bool(name, default=False):
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


def _database_url(default=None):
    """DATABASE_URL, normalised for SQLAlchemy 2 (``postgres://`` is rejected)."""
    url = os.getenv("DATABASE_URL")
    if not url:
        return default
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    """Settings shared by every environment."""

    DEBUG = False
    TESTING = False

    # Random per process outside production; tokens do not survive restarts
    SECRET_KEY = os.getenv("SECRET_KEY") or secrets.token_hex(32)

    # Tokens are issued by the auth service; falls back to SECRET_KEY
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ACCESS_EXPIRES = int(os.getenv("JWT_ACCESS_EXPIRES", "900"))

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Browser origin(s) allowed to call the API, comma-separated
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
    # Accept requests that carry no Origin header (curl, Postman, server-to-server)
    CORS_ALLOW_NO_ORIGIN = _env_bool("CORS_ALLOW_NO_ORIGIN")


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _database_url(
        "sqlite:///" + os.path.join(ROOT_DIR, "instance", "uptask_dev.db")
    )
    CORS_ALLOW_NO_ORIGIN = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SECRET_KEY = "testing-secret-key-with-at-least-32-bytes"
    JWT_ACCESS_EXPIRES = 300
    CORS_ALLOW_NO_ORIGIN = True


class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_timeout": 20,
    }

    def __init__(self):
        missing = [
            name for name, value in (
                ("DATABASE_URL", self.SQLALCHEMY_DATABASE_URI),
                ("SECRET_KEY", os.getenv("SECRET_KEY")),
            )
            if not value
        ]
        if missing:
            raise RuntimeError(f"Production requires environment variables: {', '.join(missing)}")


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
