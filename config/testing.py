"""Testing environment configuration."""

from datetime import timedelta

from .base import BaseConfig


class TestingConfig(BaseConfig):
    """In-memory SQLite, no Redis, no rate limiting."""

    ENV = "testing"
    DEBUG = True
    TESTING = True
    
    SECRET_KEY = "test-secret-key"
    JWT_EXPIRY = timedelta(hours=12)
    
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ECHO = False
    # SQLite in-memory uses a StaticPool, which rejects pool sizing options
    SQLALCHEMY_ENGINE_OPTIONS = {}
    
    LOG_LEVEL = "DEBUG"
    LOG_FORMAT = "text"
    
    REDIS_URL = ""
    RATELIMIT_ENABLED = False
    
    STALE_THRESHOLD_DAYS = 90
