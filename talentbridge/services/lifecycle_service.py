"""Lifecycle Engine - validates and applies candidate status transitions."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from talentbridge import db
from talentbridge.exceptions import ConflictRetry, InvalidInput, InvalidTransition, NotFound
from talentbridge.models import (
    AllocationAction,
    AllocationRecord,
    AuditLog,
    Candidate,
    CandidateStatus,
    Notification,
)
from talentbridge.services.authorization_policy import Actor, Operation, enforce
from talentbridge.services.placement_state import (
    Pending,
    Placed,
    Placement,
    Pooled,
    apply_placement,
    next_placement,
    placement_of,
)
from talentbridge.services.side_effect_dispatcher import AuditAction, SideEffectDispatcher
from talentbridge.services.status_graph import is_allowed

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """Outcome of a committed transition."""

    candidate: Candidate
    audit_entry: AuditLog
    notifications: List[Notification] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self, message: str) -> dict:
        return {
            "message": message,
            "candidate": self.candidate.to_dict(include_jvs=True),
            "warnings": self.warnings,
        }


def coerce_status(value) -> CandidateStatus:
    """Parse an external status value; unknown values are bad input."""
    try:
        return CandidateStatus(value)
    except ValueError:
        raise InvalidInput(
            f"Unknown status: {value}",
            {"allowed": [s.value for s in CandidateStatus]},
        )


def parse_iso_date(value, field_name: str) -> date:
    """
    Parse an ISO date (``2025-01-01``) or timestamp (``2025-01-01T09:00:00Z``).

    The whole string must parse; anything else is ``InvalidInput``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidInput(f"{field_name} must be an ISO date (YYYY-MM-DD), got {value!r}")


class LifecycleService:
    """
    The only writer of candidate status and ownership fields.

    Each transition runs as read (under row lock) -> validate -> write ->
    audit in a single transaction. The version column catches concurrent
    writers that slipped past the lock; those fail with ConflictRetry and are
    never retried here.
    """

    def __init__(self, dispatcher: Optional[SideEffectDispatcher] = None):
        self.dispatcher = dispatcher or SideEffectDispatcher()

    @staticmethod
    def load_candidate(candidate_id: int) -> Candidate:
        """Load a fresh copy of the candidate, locking the row where the database supports it."""
        candidate = db.session.scalars(
            select(Candidate)
            .where(Candidate.id == candidate_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if not candidate:
            raise NotFound(f"Candidate {candidate_id} not found")
        return candidate

    def apply_status_change(
        self,
        candidate_id: int,
        actor: Actor,
        next_status,
        note: Optional[str] = None,
        operation: str = Operation.STATUS_CHANGE,
    ) -> TransitionResult:
        """
        Move a candidate to ``next_status``.

        HQ may make any graph-legal move. JV partners may only set JV-mutable
        statuses on candidates currently placed with their JV. Routes pass
        ``Operation.STATUS_CHANGE_HQ`` or ``Operation.STATUS_CHANGE_JV`` so a
        caller of the other role is refused.

        Raises:
            NotFound, Forbidden, InvalidTransition, InvalidInput, ConflictRetry
        """
        next_status = coerce_status(next_status)
        candidate = self.load_candidate(candidate_id)
        enforce(actor, operation, candidate, next_status)

        action = AuditAction.STATUS_CHANGE if actor.is_hq else AuditAction.JV_STATUS
        return self.transition(candidate, actor, next_status, note, action)

    def transition(
        self,
        candidate: Candidate,
        actor: Actor,
        next_status: CandidateStatus,
        note: Optional[str],
        action: str,
        target_jv_id: Optional[int] = None,
        mutate: Optional[Callable[[Candidate], None]] = None,
    ) -> TransitionResult:
        """
        Apply a graph-checked transition to an already authorized, loaded candidate.

        ``mutate`` lets the allocation workflow set extra fields (e.g. the
        expected start date) inside the same transaction.
        """
        current_status = CandidateStatus(candidate.status)
        if not is_allowed(current_status, next_status):
            raise InvalidTransition(current_status.value, next_status.value)

        before = candidate.snapshot()
        before_placement = placement_of(candidate)
        placement = next_placement(before_placement, next_status, target_jv_id)

        try:
            candidate.status = next_status
            candidate.status_note = note or None
            candidate.last_status_update = datetime.utcnow()
            apply_placement(candidate, placement)
            if mutate is not None:
                mutate(candidate)

            # Flush first so the version check fires before anything else is staged
            db.session.flush()
            after = candidate.snapshot()

            audit_entry = self.dispatcher.stage_audit(
                actor_id=actor.user_id,
                entity_id=candidate.id,
                action=action,
                before=before,
                after=after,
            )
            record = self._allocation_record(candidate, actor, action, before_placement, placement, note)
            if record is not None:
                db.session.add(record)

            db.session.commit()
        except StaleDataError:
            db.session.rollback()
            logger.warning(f"Concurrent update on candidate {before['id']} ({current_status.value} -> {next_status.value})")
            raise ConflictRetry(
                "Candidate was modified by another request; reload and try again",
                {"candidate_id": before["id"]},
            )
        except SQLAlchemyError:
            db.session.rollback()
            logger.error(f"Failed to persist transition for candidate {before['id']}", exc_info=True)
            raise

        logger.info(
            f"Candidate {candidate.id} {current_status.value} -> {next_status.value} "
            f"by {actor.audit_ref} ({action})"
        )

        notices = self.dispatcher.notices_for_transition(
            action, actor, candidate, current_status, before_placement, note
        )
        dispatched = self.dispatcher.dispatch(notices)

        return TransitionResult(
            candidate=candidate,
            audit_entry=audit_entry,
            notifications=dispatched.notifications,
            warnings=dispatched.warnings,
        )

    @staticmethod
    def _allocation_record(
        candidate: Candidate,
        actor: Actor,
        action: str,
        before: Placement,
        after: Placement,
        note: Optional[str],
    ) -> Optional[AllocationRecord]:
        """Handoff history entry for transitions that move a candidate between HQ and a JV."""
        kind = None
        jv_id = None
        if isinstance(after, Pending):
            kind, jv_id = AllocationAction.ALLOCATE, after.jv_id
        elif isinstance(before, Pending) and isinstance(after, Placed):
            kind, jv_id = AllocationAction.ACCEPT, after.jv_id
        elif isinstance(before, Pending) and isinstance(after, Pooled):
            jv_id = before.jv_id
            if action == AuditAction.JV_REJECT:
                kind = AllocationAction.REJECT
            elif action == AuditAction.PROPOSAL_EXPIRED:
                kind = AllocationAction.EXPIRE
            else:
                kind = AllocationAction.WITHDRAW
        elif isinstance(before, Placed) and candidate.status == CandidateStatus.RETURNED:
            kind, jv_id = AllocationAction.RETURN, before.jv_id

        if kind is None or jv_id is None:
            return None
        return AllocationRecord(
            candidate_id=candidate.id,
            jv_id=jv_id,
            actor_id=actor.user_id,
            action=kind,
            note=note,
        )
