"""Directory Service - joint ventures and partner user membership."""

import logging
from typing import Dict, List, Optional

from sqlalchemy import select

from talentbridge import db
from talentbridge.exceptions import InvalidInput, NotFound
from talentbridge.models import JointVenture, User, UserRole
from talentbridge.services.allocation_service import AllocationService
from talentbridge.services.authorization_policy import Actor, Operation, enforce
from talentbridge.services.side_effect_dispatcher import AuditAction, SideEffectDispatcher

logger = logging.getLogger(__name__)

_UNSET = object()


class DirectoryService:
    """Service for JV and partner user management."""

    def __init__(
        self,
        allocation: Optional[AllocationService] = None,
        dispatcher: Optional[SideEffectDispatcher] = None,
    ):
        self.dispatcher = dispatcher or SideEffectDispatcher()
        self.allocation = allocation or AllocationService(dispatcher=self.dispatcher)
        self.directory = self.dispatcher.directory

    @staticmethod
    def list_jvs(actor: Actor) -> List[JointVenture]:
        """HQ sees every JV; a partner sees only their own."""
        query = select(JointVenture).order_by(JointVenture.name)
        if not actor.is_hq:
            if actor.jv_id is None:
                return []
            query = query.where(JointVenture.id == actor.jv_id)
        return list(db.session.scalars(query))

    def assign_partner_jv(
        self,
        user_id: int,
        actor: Actor,
        jv_id=_UNSET,
        is_active: Optional[bool] = None,
    ) -> Dict:
        """
        Relink, unlink or (de)activate a partner user.

        If the user's previous JV ends up with no active partners, every
        proposal pending for that JV expires back to READY since nobody is
        left to answer it.

        Returns:
            {"user": User, "expired": [candidate ids], "warnings": [...]}
        """
        enforce(actor, Operation.DIRECTORY_MANAGE)

        user = db.session.get(User, user_id)
        if not user:
            raise NotFound(f"User {user_id} not found")
        if user.role != UserRole.JV_PARTNER:
            raise InvalidInput("Only JV partner users can be linked to a JV")

        if jv_id is not _UNSET and jv_id is not None and not db.session.get(JointVenture, jv_id):
            raise NotFound(f"JV {jv_id} not found")

        before = user.to_dict()
        previous_jv_id = user.jv_id

        if jv_id is not _UNSET:
            user.jv_id = jv_id
        if is_active is not None:
            user.is_active = bool(is_active)

        db.session.flush()
        self.dispatcher.stage_audit(
            actor_id=actor.user_id,
            entity_id=user.id,
            action=AuditAction.UPDATE,
            before=before,
            after=user.to_dict(),
            entity_type="User",
        )
        db.session.commit()
        logger.info(
            f"Partner {user.id} updated by {actor.audit_ref}: "
            f"jv {previous_jv_id} -> {user.jv_id}, active={user.is_active}"
        )

        expired = []
        warnings = []
        if previous_jv_id is not None and not self.directory.partner_ids(previous_jv_id):
            logger.info(f"JV {previous_jv_id} has no active partners left; expiring its pending proposals")
            for result in self.allocation.expire_pending_for_jv(previous_jv_id, actor):
                expired.append(result.candidate.id)
                warnings.extend(result.warnings)

        return {"user": user, "expired": expired, "warnings": warnings}
