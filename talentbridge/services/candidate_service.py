"""Candidate Service - candidate record store: create, edit descriptive fields, visibility-filtered queries."""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from talentbridge import db
from talentbridge.exceptions import ConflictRetry, Forbidden, InvalidInput, NotFound
from talentbridge.models import Candidate, CandidateStatus
from talentbridge.services.authorization_policy import Actor, Operation, can_view, enforce
from talentbridge.services.lifecycle_service import LifecycleService
from talentbridge.services.side_effect_dispatcher import AuditAction, SideEffectDispatcher
from talentbridge.services.status_graph import ACTIVE_STATUSES, INITIAL_STATUS, TERMINAL_STATUSES

logger = logging.getLogger(__name__)

# Fields anyone but the lifecycle engine may write
EDITABLE_FIELDS = (
    "name",
    "email",
    "phone",
    "resume_url",
    "function_role",
    "tags",
    "interview_notes",
    "expected_salary",
    "interview_date",
)

# Owned by the lifecycle engine
ENGINE_FIELDS = frozenset({
    "status",
    "current_jv_id",
    "pending_jv_id",
    "status_note",
    "last_status_update",
    "performance_rating",
    "version",
})

SORTABLE_FIELDS = {
    "name": Candidate.name,
    "email": Candidate.email,
    "status": Candidate.status,
    "created_at": Candidate.created_at,
    "updated_at": Candidate.updated_at,
    "last_status_update": Candidate.last_status_update,
    "performance_rating": Candidate.performance_rating,
}

MAX_PAGE_SIZE = 100


def normalize_tags(tags) -> List[str]:
    """Tags may arrive as a list or a comma separated string."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [str(tag).strip() for tag in tags if str(tag).strip()]


def visibility_clause(actor: Actor):
    """SQL form of the visibility rule."""
    if actor.is_hq:
        return None
    if actor.jv_id is None:
        return Candidate.id.is_(None)
    return or_(
        Candidate.current_jv_id == actor.jv_id,
        and_(
            Candidate.pending_jv_id == actor.jv_id,
            Candidate.status == CandidateStatus.PENDING_ACCEPTANCE,
        ),
    )


class CandidateService:
    """Service for candidate record operations."""

    @staticmethod
    def create_candidate(actor: Actor, data: Dict, dispatcher: Optional[SideEffectDispatcher] = None) -> Candidate:
        """
        Create a candidate in the HQ pool with status NEW.

        Args:
            actor: Caller (must be HQ)
            data: Descriptive fields; engine-owned fields are rejected

        Returns:
            Created Candidate
        """
        enforce(actor, Operation.CANDIDATE_CREATE)
        CandidateService._reject_engine_fields(data)

        name = (data.get("name") or "").strip()
        if not name:
            raise InvalidInput("name is required")

        fields = {key: data[key] for key in EDITABLE_FIELDS if key in data}
        fields["name"] = name
        fields["tags"] = normalize_tags(data.get("tags"))

        candidate = Candidate(
            **fields,
            status=INITIAL_STATUS,
            last_status_update=datetime.utcnow(),
        )
        db.session.add(candidate)
        db.session.flush()

        (dispatcher or SideEffectDispatcher()).stage_audit(
            actor_id=actor.user_id,
            entity_id=candidate.id,
            action=AuditAction.CREATE,
            before=None,
            after=candidate.snapshot(),
        )
        db.session.commit()

        logger.info(f"Created candidate {candidate.id} by {actor.audit_ref}")
        return candidate

    @staticmethod
    def update_candidate(
        candidate_id: int,
        actor: Actor,
        data: Dict,
        dispatcher: Optional[SideEffectDispatcher] = None,
    ) -> Candidate:
        """Update descriptive fields. Status and ownership can only change through the engine."""
        enforce(actor, Operation.CANDIDATE_UPDATE)
        CandidateService._reject_engine_fields(data)

        # Same locked, fresh read as a transition; raises NotFound
        candidate = LifecycleService.load_candidate(candidate_id)

        before = candidate.snapshot()
        changed = []
        for key in EDITABLE_FIELDS:
            if key not in data:
                continue
            value = normalize_tags(data[key]) if key == "tags" else data[key]
            if key == "name" and not (value or "").strip():
                raise InvalidInput("name cannot be empty")
            if getattr(candidate, key) != value:
                setattr(candidate, key, value)
                changed.append(key)

        if not changed:
            db.session.commit()
            return candidate

        try:
            db.session.flush()
            (dispatcher or SideEffectDispatcher()).stage_audit(
                actor_id=actor.user_id,
                entity_id=candidate.id,
                action=AuditAction.UPDATE,
                before=before,
                after=candidate.snapshot(),
            )
            db.session.commit()
        except StaleDataError:
            db.session.rollback()
            logger.warning(f"Concurrent update on candidate {candidate_id} while editing {', '.join(changed)}")
            raise ConflictRetry(
                "Candidate was modified by another request; reload and try again",
                {"candidate_id": candidate_id},
            )
        except SQLAlchemyError:
            db.session.rollback()
            logger.error(f"Failed to update candidate {candidate_id}", exc_info=True)
            raise

        logger.info(f"Updated candidate {candidate_id}: {', '.join(changed)}")
        return candidate

    @staticmethod
    def _reject_engine_fields(data: Dict) -> None:
        blocked = sorted(ENGINE_FIELDS.intersection(data))
        if blocked:
            raise InvalidInput(
                "Lifecycle fields cannot be written directly",
                {"fields": blocked},
            )

    @staticmethod
    def get_visible_candidate(candidate_id: int, actor: Actor) -> Candidate:
        """
        Fetch a candidate the actor may see.

        Raises:
            NotFound: no such candidate
            Forbidden: candidate exists but is not visible to the actor
        """
        candidate = db.session.get(Candidate, candidate_id)
        if not candidate:
            raise NotFound(f"Candidate {candidate_id} not found")
        if not can_view(actor, candidate):
            raise Forbidden("Candidate is not visible to you")
        return candidate

    @staticmethod
    def list_candidates(
        actor: Actor,
        status: Optional[str] = None,
        jv_id: Optional[int] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 0,
        sort_field: Optional[str] = None,
        sort_dir: str = "asc",
    ) -> Tuple[List[Candidate], Optional[int]]:
        """
        List candidates visible to the actor.

        ``page_size`` of 0 returns everything; otherwise results are paged and
        the total count is returned alongside.
        """
        clauses = []
        visibility = visibility_clause(actor)
        if visibility is not None:
            clauses.append(visibility)
        elif jv_id:
            clauses.append(Candidate.current_jv_id == jv_id)

        if status:
            try:
                clauses.append(Candidate.status == CandidateStatus(status))
            except ValueError:
                raise InvalidInput(f"Unknown status: {status}")

        if search:
            like = f"%{search.lower()}%"
            clauses.append(or_(
                func.lower(Candidate.name).like(like),
                func.lower(Candidate.email).like(like),
                func.lower(Candidate.function_role).like(like),
            ))

        query = select(Candidate)
        if clauses:
            query = query.where(and_(*clauses))

        if sort_field:
            column = SORTABLE_FIELDS.get(sort_field)
            if column is None:
                raise InvalidInput(
                    f"Cannot sort by {sort_field}",
                    {"sortable": sorted(SORTABLE_FIELDS)},
                )
            query = query.order_by(column.desc() if sort_dir == "desc" else column.asc(), Candidate.id)
        else:
            query = query.order_by(Candidate.updated_at.desc(), Candidate.id.desc())

        page_size = min(max(page_size or 0, 0), MAX_PAGE_SIZE)
        if page_size > 0:
            page = max(page or 1, 1)
            total = db.session.scalar(select(func.count()).select_from(query.order_by(None).subquery()))
            items = list(db.session.scalars(query.limit(page_size).offset((page - 1) * page_size)))
            return items, total

        return list(db.session.scalars(query)), None

    @staticmethod
    def list_team(actor: Actor) -> List[Candidate]:
        """Candidates actively placed with the caller's JV."""
        if actor.jv_id is None:
            return []
        return list(db.session.scalars(
            select(Candidate)
            .where(
                Candidate.current_jv_id == actor.jv_id,
                Candidate.status.in_(list(ACTIVE_STATUSES)),
            )
            .order_by(Candidate.updated_at.desc(), Candidate.id.desc())
        ))

    @staticmethod
    def list_stale(
        actor: Actor,
        threshold_days: int = 90,
        limit: int = 15,
        now: Optional[datetime] = None,
    ) -> List[Candidate]:
        """Non-terminal candidates whose status has not moved for ``threshold_days``."""
        enforce(actor, Operation.REPORT_VIEW)
        cutoff = (now or datetime.utcnow()) - timedelta(days=threshold_days)
        return list(db.session.scalars(
            select(Candidate)
            .where(
                Candidate.status.not_in(list(TERMINAL_STATUSES | {CandidateStatus.RETURNED})),
                Candidate.last_status_update < cutoff,
            )
            .order_by(Candidate.last_status_update.asc())
            .limit(limit)
        ))

