"""Authentication routes: login, current user, logout."""

import logging

from flask import Blueprint, g, jsonify, request

from talentbridge import limiter
from talentbridge.middleware.auth import error_response, require_auth
from talentbridge.schemas.user_schema import ChangePasswordSchema, LoginSchema, ProfileUpdateSchema
from talentbridge.services import AuthService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    """
    Authenticate with email and password.

    Request Body: LoginSchema
    Returns: {access_token, token_type, expires_in, user}
    """
    data = LoginSchema.model_validate(request.get_json(silent=True) or {})

    try:
        result = AuthService.login(data.email, data.password)
    except ValueError as e:
        logger.warning(f"Login failed for {data.email}: {str(e)}")
        return error_response(str(e), 401)

    return jsonify(result), 200


@auth_bp.route("/me", methods=["GET"])
@require_auth
def me():
    """Current user, with their JV."""
    user = g.user.to_dict()
    user["jv"] = g.user.jv.to_dict() if g.user.jv else None
    return jsonify(user), 200


@auth_bp.route("/logout", methods=["POST"])
@require_auth
def logout():
    """Revoke the presented access token."""
    return jsonify(AuthService.logout(g.user.id, g.access_token)), 200


@auth_bp.route("/password", methods=["PUT"])
@require_auth
def change_password():
    """
    Change the caller's password.

    Request Body: ChangePasswordSchema (currentPassword / newPassword accepted)
    """
    data = ChangePasswordSchema.model_validate(request.get_json(silent=True) or {})
    return jsonify(AuthService.change_password(g.user, data.current_password, data.new_password)), 200


@auth_bp.route("/profile", methods=["PUT"])
@require_auth
def update_profile():
    """
    Update the caller's own name and email.

    Request Body: ProfileUpdateSchema
    """
    data = ProfileUpdateSchema.model_validate(request.get_json(silent=True) or {})
    user = AuthService.update_profile(g.user, name=data.name, email=data.email)
    return jsonify(user.to_dict()), 200
