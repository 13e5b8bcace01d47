"""Allowed candidate status transitions.

The graph is fixed. Every status mutation in the engine is checked against
it; nothing else decides what is reachable.
"""

from typing import Dict, FrozenSet

from talentbridge.models.candidate import CandidateStatus as S

STATUS_TRANSITIONS: Dict[S, FrozenSet[S]] = {
    S.NEW: frozenset({S.INTERVIEWING, S.READY, S.TERMINATED}),
    S.INTERVIEWING: frozenset({S.READY, S.TERMINATED}),
    S.READY: frozenset({S.PENDING_ACCEPTANCE, S.RETURNED}),
    S.PENDING_ACCEPTANCE: frozenset({S.ONBOARDING, S.READY}),
    S.ONBOARDING: frozenset({S.PROBATION, S.RETURNED}),
    S.PROBATION: frozenset({S.CONFIRMED, S.PIP, S.RESIGNED, S.TERMINATED}),
    S.CONFIRMED: frozenset({S.PIP, S.RESIGNED, S.RETURNED}),
    S.PIP: frozenset({S.CONFIRMED, S.TERMINATED, S.RESIGNED}),
    S.RETURNED: frozenset({S.READY, S.PENDING_ACCEPTANCE}),
    S.RESIGNED: frozenset(),
    S.TERMINATED: frozenset(),
}

# Statuses a JV partner may set directly (post-placement lifecycle only)
JV_MUTABLE_STATUSES: FrozenSet[S] = frozenset({
    S.ONBOARDING, S.PROBATION, S.CONFIRMED, S.PIP, S.RESIGNED, S.RETURNED,
})

POOL_STATUSES: FrozenSet[S] = frozenset({S.NEW, S.INTERVIEWING, S.READY, S.RETURNED})
ACTIVE_STATUSES: FrozenSet[S] = frozenset({S.ONBOARDING, S.PROBATION, S.CONFIRMED, S.PIP})
TERMINAL_STATUSES: FrozenSet[S] = frozenset({S.RESIGNED, S.TERMINATED})

# Statuses from which HQ may open a proposal
ALLOCATABLE_STATUSES: FrozenSet[S] = frozenset({S.READY, S.RETURNED})

INITIAL_STATUS = S.NEW


def allowed_next(status: S) -> FrozenSet[S]:
    """Return the statuses reachable in one step from ``status``."""
    return STATUS_TRANSITIONS[S(status)]


def is_allowed(current: S, target: S) -> bool:
    """Check whether ``current -> target`` is an edge of the graph."""
    return S(target) in allowed_next(current)


def is_terminal(status: S) -> bool:
    return not allowed_next(status)
