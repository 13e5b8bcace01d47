"""Authorization policy for every engine entry point.

All role and ownership checks live in ``evaluate``. Services call ``enforce``
before touching a candidate; routes only attach the authenticated actor.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from talentbridge.exceptions import Forbidden
from talentbridge.models import Candidate, CandidateStatus, User, UserRole
from talentbridge.services.status_graph import JV_MUTABLE_STATUSES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of an operation."""

    user_id: Optional[int]
    role: UserRole
    jv_id: Optional[int] = None
    email: Optional[str] = None

    @property
    def is_hq(self) -> bool:
        return self.role == UserRole.HQ_ADMIN

    @property
    def is_jv(self) -> bool:
        return self.role == UserRole.JV_PARTNER

    @property
    def audit_ref(self) -> str:
        return f"{self.role.value.lower()}:{self.user_id}"

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(user_id=user.id, role=UserRole(user.role), jv_id=user.jv_id, email=user.email)


class Operation:
    """Operation names understood by the policy."""
    CANDIDATE_CREATE = "candidate.create"
    CANDIDATE_UPDATE = "candidate.update"
    CANDIDATE_VIEW = "candidate.view"
    STATUS_CHANGE = "status.change"
    # Route-scoped status changes: HQ pool route and JV team route
    STATUS_CHANGE_HQ = "status.change.hq"
    STATUS_CHANGE_JV = "status.change.jv"
    ALLOCATION_PROPOSE = "allocation.propose"
    ALLOCATION_ACCEPT = "allocation.accept"
    ALLOCATION_REJECT = "allocation.reject"
    REVIEW_RECORD = "review.record"
    DIRECTORY_MANAGE = "directory.manage"
    REPORT_VIEW = "report.view"


HQ_ONLY_OPERATIONS = frozenset({
    Operation.CANDIDATE_CREATE,
    Operation.CANDIDATE_UPDATE,
    Operation.ALLOCATION_PROPOSE,
    Operation.STATUS_CHANGE_HQ,
    Operation.DIRECTORY_MANAGE,
    Operation.REPORT_VIEW,
})

JV_ONLY_OPERATIONS = frozenset({
    Operation.ALLOCATION_ACCEPT,
    Operation.ALLOCATION_REJECT,
})


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: str = ""


ALLOW = PolicyDecision(True)


def can_view(actor: Actor, candidate: Candidate) -> bool:
    """HQ sees everything; a JV sees its placed candidates and its pending proposals."""
    if actor.is_hq:
        return True
    if actor.jv_id is None:
        return False
    if candidate.current_jv_id == actor.jv_id:
        return True
    return (
        candidate.pending_jv_id == actor.jv_id
        and candidate.status == CandidateStatus.PENDING_ACCEPTANCE
    )


def evaluate(
    actor: Actor,
    operation: str,
    candidate: Optional[Candidate] = None,
    next_status: Optional[CandidateStatus] = None,
) -> PolicyDecision:
    """Decide whether ``actor`` may perform ``operation`` on ``candidate``."""
    if operation in HQ_ONLY_OPERATIONS:
        return ALLOW if actor.is_hq else PolicyDecision(False, "HQ_ADMIN role required")

    if operation in JV_ONLY_OPERATIONS:
        if not actor.is_jv:
            return PolicyDecision(False, "JV_PARTNER role required")
        if actor.jv_id is None:
            return PolicyDecision(False, "JV is not linked to your account")
        if candidate is not None and (
            candidate.pending_jv_id != actor.jv_id
            or candidate.status != CandidateStatus.PENDING_ACCEPTANCE
        ):
            return PolicyDecision(False, "Candidate is not pending for your JV")
        return ALLOW

    if operation in (Operation.STATUS_CHANGE, Operation.STATUS_CHANGE_JV):
        if actor.is_hq:
            if operation == Operation.STATUS_CHANGE_JV:
                return PolicyDecision(False, "JV_PARTNER role required")
            return ALLOW
        if next_status is None or CandidateStatus(next_status) not in JV_MUTABLE_STATUSES:
            return PolicyDecision(False, "Status cannot be updated by JV")
        if actor.jv_id is None or candidate is None or candidate.current_jv_id != actor.jv_id:
            return PolicyDecision(False, "Candidate is not in your team")
        return ALLOW

    if operation in (Operation.CANDIDATE_VIEW, Operation.REVIEW_RECORD):
        if candidate is None or can_view(actor, candidate):
            return ALLOW
        return PolicyDecision(False, "Candidate is not visible to you")

    return PolicyDecision(False, f"Unknown operation {operation}")


def enforce(
    actor: Actor,
    operation: str,
    candidate: Optional[Candidate] = None,
    next_status: Optional[CandidateStatus] = None,
) -> None:
    """Raise ``Forbidden`` unless ``evaluate`` allows the operation."""
    decision = evaluate(actor, operation, candidate, next_status)
    if not decision.allowed:
        logger.warning(
            f"Denied {operation} for {actor.audit_ref}"
            f"{f' on candidate {candidate.id}' if candidate is not None else ''}: {decision.reason}"
        )
        raise Forbidden(decision.reason)
