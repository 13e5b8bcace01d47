"""Notification Service - per-user notification inbox."""

import logging
from typing import List

from sqlalchemy import func, select

from talentbridge import db
from talentbridge.exceptions import NotFound
from talentbridge.models import Notification
from talentbridge.services.authorization_policy import Actor

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25


class NotificationService:
    """Service for reading and acknowledging notifications."""

    @staticmethod
    def list_notifications(actor: Actor, unread_only: bool = False, limit: int = DEFAULT_LIMIT) -> List[Notification]:
        """Latest notifications for the caller, newest first."""
        query = select(Notification).where(Notification.user_id == actor.user_id)
        if unread_only:
            query = query.where(Notification.read_at.is_(None))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
        return list(db.session.scalars(query))

    @staticmethod
    def unread_count(actor: Actor) -> int:
        return db.session.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == actor.user_id,
                Notification.read_at.is_(None),
            )
        ) or 0

    @staticmethod
    def mark_as_read(notification_id: int, actor: Actor) -> Notification:
        """
        Stamp read_at on one of the caller's notifications.

        Raises:
            NotFound: notification missing or owned by someone else
        """
        notification = db.session.scalar(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == actor.user_id,
            )
        )
        if not notification:
            raise NotFound("Notification not found")

        notification.mark_as_read()
        db.session.commit()
        logger.debug(f"Notification {notification_id} marked read by user {actor.user_id}")
        return notification
