"""Business logic services package."""

import logging
from typing import List, Optional

from sqlalchemy import select

from talentbridge import db
from talentbridge.models import AuditLog

logger = logging.getLogger(__name__)

MAX_AUDIT_ENTRIES = 50


class AuditLogService:
    """Service for reading the audit trail."""

    @staticmethod
    def get_logs(
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        limit: int = 100,
    ) -> List[AuditLog]:
        """Get audit logs.

        Args:
            entity_type: Filter by entity type
            entity_id: Filter by entity ID
            limit: Maximum number of logs

        Returns:
            List of audit logs, newest first
        """
        query = select(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc())

        if entity_type:
            query = query.where(AuditLog.entity_type == entity_type)

        if entity_id:
            query = query.where(AuditLog.entity_id == entity_id)

        return list(db.session.scalars(query.limit(limit)))

    @staticmethod
    def list_for_candidate(candidate_id: int, actor) -> List[AuditLog]:
        """Audit trail of a visible candidate, newest first."""
        from talentbridge.services.candidate_service import CandidateService

        candidate = CandidateService.get_visible_candidate(candidate_id, actor)
        return AuditLogService.get_logs("Candidate", candidate.id, MAX_AUDIT_ENTRIES)


# Import domain services (after AuditLogService is defined)
from talentbridge.services.authorization_policy import Actor
from talentbridge.services.side_effect_dispatcher import SideEffectDispatcher, UserDirectory
from talentbridge.services.lifecycle_service import LifecycleService
from talentbridge.services.allocation_service import AllocationService
from talentbridge.services.candidate_service import CandidateService
from talentbridge.services.performance_service import PerformanceService
from talentbridge.services.notification_service import NotificationService
from talentbridge.services.comment_service import CommentService
from talentbridge.services.directory_service import DirectoryService
from talentbridge.services.auth_service import AuthService

__all__ = [
    "AuditLogService",
    "Actor",
    "SideEffectDispatcher",
    "UserDirectory",
    "LifecycleService",
    "AllocationService",
    "CandidateService",
    "PerformanceService",
    "NotificationService",
    "CommentService",
    "DirectoryService",
    "AuthService",
]
