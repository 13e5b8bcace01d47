"""Base configuration for all environments."""

import os
from datetime import timedelta
from typing import List


class BaseConfig:
    """Base configuration class with common settings."""

    # Flask Configuration
    ENV: str = os.getenv("ENVIRONMENT", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    
    # Database Configuration
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLALCHEMY_ECHO: bool = False
    
    # SQLAlchemy Engine Options
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_size": int(os.getenv("SQLALCHEMY_ENGINE_OPTIONS_POOL_SIZE", 10)),
        "pool_recycle": int(os.getenv("SQLALCHEMY_ENGINE_OPTIONS_POOL_RECYCLE", 3600)),
        "pool_pre_ping": os.getenv("SQLALCHEMY_ENGINE_OPTIONS_POOL_PRE_PING", "True").lower() == "true",
    }
    
    # Auth
    JWT_EXPIRY: timedelta = timedelta(hours=int(os.getenv("JWT_EXPIRY_HOURS", 12)))
    
    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]
    # Paging and unread counters travel in response headers
    CORS_EXPOSE_HEADERS: List[str] = ["X-Total-Count", "X-Unread-Count", "X-Request-ID"]
    CORS_SUPPORTS_CREDENTIALS: bool = True
    
    # Rate limiting (Flask-Limiter reads RATELIMIT_* keys)
    RATELIMIT_ENABLED: bool = True
    RATELIMIT_STORAGE_URI: str = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    
    # Redis Configuration
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    
    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")
    
    # Lifecycle reporting
    STALE_THRESHOLD_DAYS: int = int(os.getenv("STALE_THRESHOLD_DAYS", 90))
