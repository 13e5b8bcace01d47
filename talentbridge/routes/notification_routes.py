"""Notification routes."""

import logging

from flask import Blueprint, g, jsonify, request

from talentbridge.middleware.auth import require_auth
from talentbridge.services import NotificationService

logger = logging.getLogger(__name__)

notification_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notification_bp.route("", methods=["GET"])
@require_auth
def list_notifications():
    """Latest 25 notifications, newest first. ``unread_only=true`` filters to unread."""
    unread_only = (request.args.get("unread_only") or "").lower() in ("1", "true", "yes")
    notifications = NotificationService.list_notifications(g.actor, unread_only=unread_only)
    response = jsonify([notification.to_dict() for notification in notifications])
    response.headers["X-Unread-Count"] = str(NotificationService.unread_count(g.actor))
    return response, 200


@notification_bp.route("/<int:notification_id>/read", methods=["POST"])
@require_auth
def mark_read(notification_id: int):
    notification = NotificationService.mark_as_read(notification_id, g.actor)
    return jsonify(notification.to_dict()), 200
