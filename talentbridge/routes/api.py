"""API routes for the application."""

from datetime import datetime

from flask import Blueprint, current_app, jsonify

from talentbridge.schemas import AppInfoSchema, HealthCheckSchema

bp = Blueprint("api", __name__, url_prefix="/api")

APP_NAME = "TalentBridge Server"
APP_VERSION = "0.1.0"


@bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    schema = HealthCheckSchema(
        status="healthy",
        timestamp=datetime.utcnow(),
        environment=current_app.config.get("ENV", "development"),
    )
    return jsonify(schema.model_dump()), 200


@bp.route("/info", methods=["GET"])
def app_info():
    """Get application information."""
    schema = AppInfoSchema(
        name=APP_NAME,
        version=APP_VERSION,
        environment=current_app.config.get("ENV", "development"),
    )
    return jsonify(schema.model_dump()), 200


@bp.route("/", methods=["GET"])
def root():
    """Root API endpoint."""
    return jsonify({
        "message": "Welcome to the TalentBridge API",
        "version": APP_VERSION,
        "endpoints": {
            "health": "/api/health",
            "info": "/api/info",
            "auth": "/api/auth/login",
            "candidates": "/api/candidates",
            "inbox": "/api/inbox",
            "team": "/api/team",
            "notifications": "/api/notifications",
        },
    }), 200
