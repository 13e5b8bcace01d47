"""Candidate ownership as a tagged union.

A candidate is in exactly one of four placements:

* ``Pooled``         - held by HQ (NEW, INTERVIEWING, READY, RETURNED)
* ``Pending(jv_id)`` - proposed to a JV, awaiting its decision
* ``Placed(jv_id)``  - actively employed by a JV
* ``Ended(status)``  - RESIGNED or TERMINATED

``current_jv_id`` and ``pending_jv_id`` on the row are only ever written from
a placement value, so ``pending_jv_id`` is set iff the status is
PENDING_ACCEPTANCE and ``current_jv_id`` is set only for active statuses.
"""

from dataclasses import dataclass
from typing import Optional, Union

from talentbridge.exceptions import InvalidInput, InvalidTransition
from talentbridge.models.candidate import Candidate, CandidateStatus
from talentbridge.services.status_graph import ACTIVE_STATUSES, POOL_STATUSES, TERMINAL_STATUSES


@dataclass(frozen=True)
class Pooled:
    pass


@dataclass(frozen=True)
class Pending:
    jv_id: int


@dataclass(frozen=True)
class Placed:
    jv_id: int


@dataclass(frozen=True)
class Ended:
    reason: CandidateStatus


Placement = Union[Pooled, Pending, Placed, Ended]


def placement_of(candidate: Candidate) -> Placement:
    """Derive the placement from a stored candidate row."""
    status = CandidateStatus(candidate.status)
    if status == CandidateStatus.PENDING_ACCEPTANCE:
        return Pending(candidate.pending_jv_id)
    if status in ACTIVE_STATUSES:
        return Placed(candidate.current_jv_id)
    if status in TERMINAL_STATUSES:
        return Ended(status)
    return Pooled()


def next_placement(
    current: Placement,
    next_status: CandidateStatus,
    target_jv_id: Optional[int] = None,
) -> Placement:
    """
    Compute the placement a candidate moves into for ``next_status``.

    Graph legality is checked separately; this only rejects combinations
    that would leave the ownership fields inconsistent.
    """
    next_status = CandidateStatus(next_status)

    if next_status == CandidateStatus.PENDING_ACCEPTANCE:
        if target_jv_id is None:
            raise InvalidInput("A target JV is required to propose a candidate; use the allocation endpoint")
        return Pending(target_jv_id)

    if next_status in ACTIVE_STATUSES:
        if isinstance(current, Placed):
            return Placed(current.jv_id)
        if isinstance(current, Pending) and next_status == CandidateStatus.ONBOARDING:
            return Placed(current.jv_id)
        raise InvalidTransition(
            _status_name(current),
            next_status.value,
            f"Cannot enter {next_status.value} without a JV placement",
        )

    if next_status in TERMINAL_STATUSES:
        return Ended(next_status)

    if next_status in POOL_STATUSES:
        return Pooled()

    raise InvalidTransition(_status_name(current), next_status.value)


def apply_placement(candidate: Candidate, placement: Placement) -> None:
    """Write the ownership columns for ``placement`` onto the row."""
    if isinstance(placement, Pending):
        candidate.pending_jv_id = placement.jv_id
        candidate.current_jv_id = None
    elif isinstance(placement, Placed):
        candidate.current_jv_id = placement.jv_id
        candidate.pending_jv_id = None
    else:
        candidate.current_jv_id = None
        candidate.pending_jv_id = None


def placement_jv_id(placement: Placement) -> Optional[int]:
    """JV attached to the placement, if any."""
    if isinstance(placement, (Pending, Placed)):
        return placement.jv_id
    return None


def _status_name(placement: Placement) -> str:
    return type(placement).__name__
