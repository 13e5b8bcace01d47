"""Custom middleware package."""

import logging
import uuid
from datetime import datetime

from flask import Flask, jsonify, request

logger = logging.getLogger(__name__)


def setup_request_logging_middleware(app: Flask) -> None:
    """Setup request logging middleware."""

    @app.before_request
    def log_request():
        """Log incoming requests."""
        request.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.start_time = datetime.utcnow()

        app.logger.info(
            f"Request started: {request.method} {request.path}",
            extra={
                "request_id": request.request_id,
                "method": request.method,
                "path": request.path,
                "remote_addr": request.remote_addr,
            }
        )

    @app.after_request
    def log_response(response):
        """Log outgoing responses."""
        start_time = getattr(request, "start_time", None)
        duration = (datetime.utcnow() - start_time).total_seconds() * 1000 if start_time else 0.0
        request_id = getattr(request, "request_id", None) or str(uuid.uuid4())

        app.logger.info(
            f"Request completed: {request.method} {request.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
                "duration_ms": duration,
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response


def setup_json_body_middleware(app: Flask) -> None:
    """Reject non-JSON bodies on write requests."""

    @app.before_request
    def check_request_json():
        """Validate JSON content type when necessary."""
        if request.method in ["POST", "PUT", "PATCH"]:
            if request.data and not request.is_json:
                return jsonify({
                    "error": "InvalidInput",
                    "message": "Content-Type must be application/json",
                    "status": 400,
                }), 400


def register_middleware(app: Flask) -> None:
    """Register all middleware."""
    setup_request_logging_middleware(app)
    setup_json_body_middleware(app)
