"""Flask application factory and initialization."""

import logging
from typing import Type

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from pydantic import ValidationError
import redis

from config.base import BaseConfig

# Initialize extensions
db = SQLAlchemy()
cors = CORS()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"]
)
redis_client = None


def setup_logging(app: Flask, log_format: str = "json") -> None:
    """Setup logging configuration for the application."""
    log_level = app.config.get("LOG_LEVEL", "INFO")

    if log_format == "json":
        # Structured JSON logging
        from pythonjsonlogger import jsonlogger

        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)

    # Set log level on the app logger and on our package loggers
    app.logger.setLevel(getattr(logging, log_level))
    logging.getLogger("talentbridge").setLevel(getattr(logging, log_level))

    app.logger.info(
        "Application initialized",
        extra={
            "environment": app.config.get("ENV", "development"),
            "debug": app.debug,
            "testing": app.testing,
        }
    )


def setup_redis(app: Flask):
    """Setup Redis connection. Returns None when Redis is not configured or unreachable."""
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        app.logger.info("Redis disabled (REDIS_URL not set)")
        return None

    try:
        redis_conn = redis.from_url(redis_url, decode_responses=True)
        redis_conn.ping()
        app.logger.info(f"Redis connected: {redis_url}")
        return redis_conn
    except redis.RedisError as e:
        app.logger.error(f"Failed to connect to Redis: {e}")
        if not app.debug and not app.testing:
            raise
        return None


def error_body(error: str, message: str, status: int, details: dict = None) -> dict:
    """Standard error envelope shared by every handler."""
    body = {
        "error": error,
        "message": message,
        "status": status,
    }
    if details:
        body["details"] = details
    return body


def setup_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from talentbridge.exceptions import LifecycleError

    @app.errorhandler(LifecycleError)
    def lifecycle_error(error):
        """Render engine errors with their kind."""
        if error.status_code >= 500:
            app.logger.error(f"{error.kind}: {error.message}")
        else:
            app.logger.warning(f"{error.kind}: {error.message}")
        db.session.rollback()
        return jsonify(error_body(error.kind, error.message, error.status_code, error.details)), error.status_code

    @app.errorhandler(ValidationError)
    def validation_error(error):
        """Handle pydantic validation failures as InvalidInput."""
        app.logger.warning(f"Validation error: {error}")
        return jsonify(error_body(
            "InvalidInput",
            "Invalid request data",
            400,
            {"validation_errors": error.errors(include_url=False, include_context=False)},
        )), 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return error_body("NotFound", "The requested resource was not found", 404), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return error_body("Method Not Allowed", "The HTTP method is not allowed for this resource", 405), 405

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 errors."""
        return error_body("InvalidInput", "The request was invalid", 400), 400

    @app.errorhandler(429)
    def rate_limited(error):
        """Handle rate limit errors."""
        return error_body("Too Many Requests", "Rate limit exceeded", 429), 429

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f"Internal server error: {error}", exc_info=True)
        db.session.rollback()
        return error_body("Internal Server Error", "An unexpected error occurred", 500), 500


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    from talentbridge.routes import api
    from talentbridge.routes import auth_routes
    from talentbridge.routes import candidate_routes
    from talentbridge.routes import inbox_routes
    from talentbridge.routes import team_routes
    from talentbridge.routes import notification_routes
    from talentbridge.routes import directory_routes

    # Health check and info
    app.register_blueprint(api.bp)

    # Authentication
    app.register_blueprint(auth_routes.auth_bp)

    # HQ candidate pool, allocation and status management
    app.register_blueprint(candidate_routes.candidate_bp)

    # JV inbox (accept / reject proposals)
    app.register_blueprint(inbox_routes.inbox_bp)

    # JV team (post-placement status, reviews)
    app.register_blueprint(team_routes.team_bp)

    # Notification inbox
    app.register_blueprint(notification_routes.notification_bp)

    # JV and user directory
    app.register_blueprint(directory_routes.directory_bp)


def create_app(config: Type[BaseConfig] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Configuration class to use. If None, uses environment-based config.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    if config is None:
        from config.settings import settings

        if settings.is_production:
            from config.production import ProductionConfig
            config = ProductionConfig
        elif settings.is_testing:
            from config.testing import TestingConfig
            config = TestingConfig
        else:
            from config.development import DevelopmentConfig
            config = DevelopmentConfig

    app.config.from_object(config)

    # Setup logging
    setup_logging(app, app.config.get("LOG_FORMAT", "json"))

    # Initialize extensions
    db.init_app(app)
    limiter.init_app(app)

    cors.init_app(app, resources={
        r"/api/*": {
            "origins": app.config.get("CORS_ORIGINS", ["*"]),
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": app.config.get("CORS_ALLOW_HEADERS", ["*"]),
            "expose_headers": app.config.get("CORS_EXPOSE_HEADERS", ["*"]),
            "supports_credentials": app.config.get("CORS_SUPPORTS_CREDENTIALS", True),
        }
    })

    # Setup Redis
    global redis_client
    redis_client = setup_redis(app)

    # Middleware and error handlers
    from talentbridge.middleware import register_middleware
    register_middleware(app)
    setup_error_handlers(app)

    # Register blueprints
    register_blueprints(app)

    # Note: Database tables are managed via Alembic migrations (python manage.py migrate)

    app.logger.info(
        "Flask application created",
        extra={
            "config": config.__name__,
            "database": app.config.get("SQLALCHEMY_DATABASE_URI", "").split("://")[0],
        }
    )

    return app


def get_db():
    """Get database instance."""
    return db


def get_redis():
    """Get Redis client instance."""
    return redis_client
