"""Bearer token authentication middleware."""

import logging
from functools import wraps

from flask import g, jsonify, request

from talentbridge.services.auth_service import AuthService
from talentbridge.services.authorization_policy import Actor

logger = logging.getLogger(__name__)


def error_response(message: str, status: int = 401):
    """Helper to create error responses."""
    return jsonify({
        "error": "Unauthorized",
        "message": message,
        "status": status,
    }), status


def get_bearer_token():
    """Extract the bearer token from the Authorization header, or None."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def require_auth(f):
    """
    Decorator to require an authenticated user.

    The user is reloaded on every request, so role and JV membership
    changes take effect immediately. Attaches ``g.user`` and ``g.actor``.

    Usage:
        @bp.route("/me")
        @require_auth
        def me():
            return g.user.to_dict()
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not request.headers.get("Authorization"):
            return error_response("Authorization header is required")

        access_token = get_bearer_token()
        if access_token is None:
            return error_response("Invalid Authorization header format. Use: Bearer <token>")

        try:
            user, payload = AuthService.validate_token(access_token)
        except ValueError as e:
            logger.info(f"Rejected token: {str(e)}")
            return error_response(str(e))

        g.user = user
        g.actor = Actor.from_user(user)
        g.access_token = access_token
        g.token_payload = payload

        return f(*args, **kwargs)

    return decorated_function
