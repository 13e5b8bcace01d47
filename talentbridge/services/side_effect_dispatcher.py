"""Side-Effect Dispatcher - audit entries and notification fan-out for committed transitions."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from talentbridge import db
from talentbridge.models import AuditLog, Notification, User, UserRole, CandidateStatus
from talentbridge.services.placement_state import Pending, Placement, placement_jv_id

logger = logging.getLogger(__name__)


class NotificationType:
    """Notification type tags."""
    ALLOCATED = "candidate.allocated"
    ACCEPTED = "candidate.accepted"
    REJECTED = "candidate.rejected"
    OFFBOARDED = "candidate.offboarded"
    RETURNED = "candidate.returned"
    PROPOSAL_WITHDRAWN = "candidate.proposal_withdrawn"
    PLACED_BY_HQ = "candidate.placed_by_hq"
    PROPOSAL_EXPIRED = "candidate.proposal_expired"
    PERFORMANCE_ALERT = "performance.alert"


class AuditAction:
    """Audit action tags."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    STATUS_CHANGE = "STATUS_CHANGE"
    JV_STATUS = "JV_STATUS"
    ALLOCATE = "ALLOCATE"
    JV_ACCEPT = "JV_ACCEPT"
    JV_REJECT = "JV_REJECT"
    PROPOSAL_EXPIRED = "PROPOSAL_EXPIRED"


@dataclass(frozen=True)
class Recipients:
    """A recipient set: all HQ admins, or all partner users of one JV."""

    role: UserRole
    jv_id: Optional[int] = None

    @classmethod
    def hq(cls) -> "Recipients":
        return cls(UserRole.HQ_ADMIN)

    @classmethod
    def jv(cls, jv_id: int) -> "Recipients":
        return cls(UserRole.JV_PARTNER, jv_id)


@dataclass
class Notice:
    """A notification to fan out to one or more recipient sets."""

    type: str
    audiences: List[Recipients]
    payload: Dict


@dataclass
class DispatchResult:
    notifications: List[Notification] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def extend(self, other: "DispatchResult") -> None:
        self.notifications.extend(other.notifications)
        self.warnings.extend(other.warnings)


class UserDirectory:
    """
    Read port over the user directory.

    Every call hits the database so membership changes are seen on the very
    next dispatch.
    """

    def hq_admin_ids(self) -> List[int]:
        return list(db.session.scalars(
            select(User.id)
            .where(User.role == UserRole.HQ_ADMIN, User.is_active.is_(True))
            .order_by(User.id)
        ))

    def partner_ids(self, jv_id: int) -> List[int]:
        if jv_id is None:
            return []
        return list(db.session.scalars(
            select(User.id)
            .where(
                User.role == UserRole.JV_PARTNER,
                User.jv_id == jv_id,
                User.is_active.is_(True),
            )
            .order_by(User.id)
        ))

    def resolve(self, recipients: Recipients) -> List[int]:
        if recipients.role == UserRole.HQ_ADMIN:
            return self.hq_admin_ids()
        return self.partner_ids(recipients.jv_id)


class SideEffectDispatcher:
    """Produces the audit entry and notifications for a transition."""

    def __init__(self, directory: Optional[UserDirectory] = None):
        self.directory = directory or UserDirectory()

    # ==================== Audit ====================

    def stage_audit(
        self,
        actor_id: Optional[int],
        entity_id: int,
        action: str,
        before: Optional[Dict],
        after: Optional[Dict],
        entity_type: str = "Candidate",
    ) -> AuditLog:
        """
        Add one audit entry to the current session.

        Called inside the primary transaction; the caller commits, so the
        entry exists iff the state change does.
        """
        entry = AuditLog(
            actor_id=actor_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            before=before,
            after=after,
        )
        db.session.add(entry)
        return entry

    # ==================== Notifications ====================

    def recipients_for(self, audiences: Iterable[Recipients]) -> List[int]:
        """Resolve recipient sets to distinct user ids, keeping first-seen order."""
        seen = []
        for audience in audiences:
            for user_id in self.directory.resolve(audience):
                if user_id not in seen:
                    seen.append(user_id)
        return seen

    def _write_notifications(self, rows: List[Notification]) -> None:
        db.session.add_all(rows)
        db.session.commit()

    def notify(self, notice: Notice) -> DispatchResult:
        """
        Create one notification per recipient in its own transaction.

        Failures are logged and reported as warnings; they never undo the
        already committed state change.
        """
        result = DispatchResult()
        try:
            user_ids = self.recipients_for(notice.audiences)
            if not user_ids:
                logger.info(f"No recipients for {notice.type}; nothing to send")
                return result

            rows = [
                Notification(user_id=user_id, type=notice.type, payload=notice.payload)
                for user_id in user_ids
            ]
            self._write_notifications(rows)
            result.notifications.extend(rows)
            logger.info(f"Sent {len(rows)} {notice.type} notification(s)")
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to dispatch {notice.type} notifications: {str(e)}", exc_info=True)
            result.warnings.append(f"Notification '{notice.type}' could not be delivered")
        return result

    def dispatch(self, notices: Iterable[Notice]) -> DispatchResult:
        result = DispatchResult()
        for notice in notices:
            result.extend(self.notify(notice))
        return result

    # ==================== Transition mapping ====================

    def notices_for_transition(
        self,
        action: str,
        actor,
        candidate,
        before_status: CandidateStatus,
        before_placement: Placement,
        note: Optional[str] = None,
    ) -> List[Notice]:
        """Map a committed transition to the notifications it produces."""
        base = {"candidate_id": candidate.id, "candidate_name": candidate.name}
        before_jv = placement_jv_id(before_placement)

        if action == AuditAction.ALLOCATE:
            return [Notice(
                NotificationType.ALLOCATED,
                [Recipients.jv(candidate.pending_jv_id)],
                {**base, "note": note},
            )]

        if action == AuditAction.JV_ACCEPT:
            return [Notice(
                NotificationType.ACCEPTED,
                [Recipients.hq()],
                {**base, "jv_id": candidate.current_jv_id},
            )]

        if action == AuditAction.JV_REJECT:
            return [Notice(
                NotificationType.REJECTED,
                [Recipients.hq()],
                {**base, "reason": note, "jv_id": before_jv},
            )]

        if action == AuditAction.PROPOSAL_EXPIRED:
            return [Notice(
                NotificationType.PROPOSAL_EXPIRED,
                [Recipients.hq()],
                {**base, "jv_id": before_jv, "reason": note},
            )]

        if action not in (AuditAction.STATUS_CHANGE, AuditAction.JV_STATUS):
            return []

        status = CandidateStatus(candidate.status)
        # When HQ ends a placement, the JV that owned it hears about it too
        audiences = [Recipients.hq()]
        if actor.is_hq and before_jv is not None and not isinstance(before_placement, Pending):
            audiences.append(Recipients.jv(before_jv))

        if status in (CandidateStatus.RESIGNED, CandidateStatus.TERMINATED):
            return [Notice(
                NotificationType.OFFBOARDED,
                audiences,
                {**base, "status": status.value, "jv_id": before_jv},
            )]

        if status == CandidateStatus.RETURNED:
            return [Notice(
                NotificationType.RETURNED,
                audiences,
                {**base, "jv_id": before_jv, "note": note},
            )]

        if (
            before_status == CandidateStatus.PENDING_ACCEPTANCE
            and status == CandidateStatus.READY
            and isinstance(before_placement, Pending)
        ):
            return [Notice(
                NotificationType.PROPOSAL_WITHDRAWN,
                [Recipients.jv(before_placement.jv_id)],
                {**base, "note": note},
            )]

        # HQ completed the handoff itself; the receiving JV still has to hear about it
        if (
            before_status == CandidateStatus.PENDING_ACCEPTANCE
            and status == CandidateStatus.ONBOARDING
            and isinstance(before_placement, Pending)
        ):
            return [Notice(
                NotificationType.PLACED_BY_HQ,
                [Recipients.jv(before_placement.jv_id)],
                {**base, "jv_id": before_placement.jv_id, "note": note},
            )]

        return []
