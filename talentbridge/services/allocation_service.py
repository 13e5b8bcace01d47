"""Allocation Workflow - two-phase handoff of a candidate from the HQ pool to a JV."""

import logging
from datetime import date
from typing import List, Optional, Union

from sqlalchemy import select

from talentbridge import db
from talentbridge.exceptions import InvalidInput, InvalidTransition, NotFound
from talentbridge.models import AllocationRecord, Candidate, CandidateStatus, JointVenture
from talentbridge.services.authorization_policy import Actor, Operation, enforce
from talentbridge.services.lifecycle_service import LifecycleService, TransitionResult, parse_iso_date
from talentbridge.services.side_effect_dispatcher import AuditAction, SideEffectDispatcher
from talentbridge.services.status_graph import ALLOCATABLE_STATUSES

logger = logging.getLogger(__name__)

ACCEPTED_NOTE = "Accepted by JV"


def parse_start_date(value: Union[str, date, None]) -> date:
    """Accept an ISO date string or a date; empty values are rejected."""
    if value is None or not str(value).strip():
        raise InvalidInput("expected_start_date is required")
    return parse_iso_date(value, "expected_start_date")


class AllocationService:
    """
    Propose -> accept / reject, layered on the lifecycle engine.

    A candidate has at most one open proposal: PENDING_ACCEPTANCE is the only
    status that carries a pending JV, and leaving it always clears it.
    """

    def __init__(
        self,
        lifecycle: Optional[LifecycleService] = None,
        dispatcher: Optional[SideEffectDispatcher] = None,
    ):
        self.lifecycle = lifecycle or LifecycleService(dispatcher)

    def propose(
        self,
        candidate_id: int,
        actor: Actor,
        target_jv_id: int,
        note: Optional[str] = None,
    ) -> TransitionResult:
        """
        HQ proposes a READY or RETURNED candidate to a JV.

        Raises:
            Forbidden: caller is not HQ
            InvalidInput: no target JV given
            NotFound: candidate or target JV missing
            InvalidTransition: candidate is not READY or RETURNED
        """
        enforce(actor, Operation.ALLOCATION_PROPOSE)
        if not target_jv_id:
            raise InvalidInput("target_jv_id is required")

        candidate = self.lifecycle.load_candidate(candidate_id)
        if not db.session.get(JointVenture, target_jv_id):
            raise NotFound(f"Target JV {target_jv_id} not found")

        status = CandidateStatus(candidate.status)
        if status not in ALLOCATABLE_STATUSES:
            raise InvalidTransition(
                status.value,
                CandidateStatus.PENDING_ACCEPTANCE.value,
                "Candidate must be READY or RETURNED to allocate",
            )

        result = self.lifecycle.transition(
            candidate,
            actor,
            CandidateStatus.PENDING_ACCEPTANCE,
            note,
            AuditAction.ALLOCATE,
            target_jv_id=target_jv_id,
        )
        logger.info(f"Candidate {candidate_id} proposed to JV {target_jv_id} by {actor.audit_ref}")
        return result

    def _load_inbox_candidate(self, candidate_id: int, actor: Actor) -> Candidate:
        """Ownership by query: the candidate must be pending for the caller's JV."""
        candidate = db.session.scalars(
            select(Candidate)
            .where(
                Candidate.id == candidate_id,
                Candidate.pending_jv_id == actor.jv_id,
                Candidate.status == CandidateStatus.PENDING_ACCEPTANCE,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if not candidate:
            raise NotFound("Candidate not found in your inbox")
        return candidate

    def accept(
        self,
        candidate_id: int,
        actor: Actor,
        expected_start_date: Union[str, date, None],
    ) -> TransitionResult:
        """JV accepts a proposal: the candidate is placed with the JV and starts ONBOARDING."""
        enforce(actor, Operation.ALLOCATION_ACCEPT)
        start_date = parse_start_date(expected_start_date)

        candidate = self._load_inbox_candidate(candidate_id, actor)
        enforce(actor, Operation.ALLOCATION_ACCEPT, candidate)

        def set_start_date(c: Candidate) -> None:
            c.expected_start_date = start_date

        result = self.lifecycle.transition(
            candidate,
            actor,
            CandidateStatus.ONBOARDING,
            ACCEPTED_NOTE,
            AuditAction.JV_ACCEPT,
            mutate=set_start_date,
        )
        logger.info(f"Candidate {candidate_id} accepted by JV {actor.jv_id}")
        return result

    def reject(self, candidate_id: int, actor: Actor, reason: Optional[str]) -> TransitionResult:
        """JV declines a proposal: the candidate goes back to READY with the reason as its note."""
        enforce(actor, Operation.ALLOCATION_REJECT)
        if reason is None or not str(reason).strip():
            raise InvalidInput("Rejection reason is required")

        candidate = self._load_inbox_candidate(candidate_id, actor)
        enforce(actor, Operation.ALLOCATION_REJECT, candidate)

        result = self.lifecycle.transition(
            candidate,
            actor,
            CandidateStatus.READY,
            reason.strip(),
            AuditAction.JV_REJECT,
        )
        logger.info(f"Candidate {candidate_id} rejected by JV {actor.jv_id}")
        return result

    def expire_pending_for_jv(
        self,
        jv_id: int,
        actor: Actor,
        reason: str = "Proposal expired: JV has no active partner users",
    ) -> List[TransitionResult]:
        """
        Return every candidate pending for ``jv_id`` to READY.

        Used when a JV loses its last active partner, so no one is left to
        accept or reject the proposals.
        """
        enforce(actor, Operation.DIRECTORY_MANAGE)
        candidate_ids = list(db.session.scalars(
            select(Candidate.id).where(
                Candidate.pending_jv_id == jv_id,
                Candidate.status == CandidateStatus.PENDING_ACCEPTANCE,
            )
        ))

        results = []
        for candidate_id in candidate_ids:
            candidate = self.lifecycle.load_candidate(candidate_id)
            if candidate.status != CandidateStatus.PENDING_ACCEPTANCE or candidate.pending_jv_id != jv_id:
                continue
            results.append(self.lifecycle.transition(
                candidate,
                actor,
                CandidateStatus.READY,
                reason,
                AuditAction.PROPOSAL_EXPIRED,
            ))

        if results:
            logger.info(f"Expired {len(results)} pending proposal(s) for JV {jv_id}")
        return results

    @staticmethod
    def list_inbox(actor: Actor) -> List[Candidate]:
        """Candidates currently proposed to the caller's JV, newest first."""
        if actor.jv_id is None:
            return []
        return list(db.session.scalars(
            select(Candidate)
            .where(
                Candidate.pending_jv_id == actor.jv_id,
                Candidate.status == CandidateStatus.PENDING_ACCEPTANCE,
            )
            .order_by(Candidate.updated_at.desc(), Candidate.id.desc())
        ))

    @staticmethod
    def get_history(candidate: Candidate) -> List[AllocationRecord]:
        """Allocation history for a candidate, oldest first."""
        return list(db.session.scalars(
            select(AllocationRecord)
            .where(AllocationRecord.candidate_id == candidate.id)
            .order_by(AllocationRecord.created_at, AllocationRecord.id)
        ))
