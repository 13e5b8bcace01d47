"""
Unit tests for DirectoryService
Tests partner relinking and expiry of orphaned proposals
"""
import pytest
from sqlalchemy import select

from talentbridge.exceptions import Forbidden, InvalidInput, NotFound
from talentbridge.models import AllocationAction, AllocationRecord, CandidateStatus as S, Notification
from talentbridge.services.directory_service import DirectoryService
from talentbridge.services.side_effect_dispatcher import NotificationType


@pytest.mark.unit
class TestListJvs:

    def test_hq_sees_all(self, db, jv1, jv2, hq_actor):
        assert [jv.name for jv in DirectoryService.list_jvs(hq_actor)] == ["SalesForce", "TechCorp"]

    def test_partner_sees_own(self, db, jv1, jv2, jv1_actor):
        assert [jv.id for jv in DirectoryService.list_jvs(jv1_actor)] == [jv1.id]


@pytest.mark.unit
class TestAssignPartner:

    def test_unlinking_last_partner_expires_pending(self, db, make_candidate, jv1, hq_admin, hq_actor, partner1):
        candidate = make_candidate(status=S.PENDING_ACCEPTANCE, pending_jv=jv1)

        result = DirectoryService().assign_partner_jv(partner1.id, hq_actor, jv_id=None)

        assert result["user"].jv_id is None
        assert result["expired"] == [candidate.id]

        db.session.refresh(candidate)
        assert candidate.status == S.READY
        assert candidate.pending_jv_id is None

        record = db.session.scalar(select(AllocationRecord).where(AllocationRecord.candidate_id == candidate.id))
        assert record.action == AllocationAction.EXPIRE
        assert record.jv_id == jv1.id

        alerts = list(db.session.scalars(
            select(Notification).where(Notification.type == NotificationType.PROPOSAL_EXPIRED)
        ))
        assert [n.user_id for n in alerts] == [hq_admin.id]

    def test_deactivating_last_partner_expires_pending(self, db, make_candidate, jv1, hq_actor, partner1):
        candidate = make_candidate(status=S.PENDING_ACCEPTANCE, pending_jv=jv1)

        result = DirectoryService().assign_partner_jv(partner1.id, hq_actor, is_active=False)

        assert result["user"].is_active is False
        assert result["user"].jv_id == jv1.id
        assert result["expired"] == [candidate.id]

    def test_remaining_partner_keeps_proposals(self, db, make_candidate, jv1, jv2, hq_actor, partner1, partner1b):
        candidate = make_candidate(status=S.PENDING_ACCEPTANCE, pending_jv=jv1)

        result = DirectoryService().assign_partner_jv(partner1.id, hq_actor, jv_id=jv2.id)

        assert result["user"].jv_id == jv2.id
        assert result["expired"] == []
        db.session.refresh(candidate)
        assert candidate.status == S.PENDING_ACCEPTANCE
        assert candidate.pending_jv_id == jv1.id

    def test_placed_candidates_are_untouched(self, db, make_candidate, jv1, hq_actor, partner1):
        placed = make_candidate(status=S.CONFIRMED, current_jv=jv1)

        DirectoryService().assign_partner_jv(partner1.id, hq_actor, jv_id=None)

        db.session.refresh(placed)
        assert placed.status == S.CONFIRMED
        assert placed.current_jv_id == jv1.id

    def test_only_partners_can_be_linked(self, db, jv1, hq_admin, hq_actor):
        with pytest.raises(InvalidInput):
            DirectoryService().assign_partner_jv(hq_admin.id, hq_actor, jv_id=jv1.id)

    def test_unknown_user_or_jv(self, db, hq_actor, partner1):
        with pytest.raises(NotFound):
            DirectoryService().assign_partner_jv(9999, hq_actor, jv_id=None)
        with pytest.raises(NotFound):
            DirectoryService().assign_partner_jv(partner1.id, hq_actor, jv_id=9999)

    def test_partner_cannot_manage_directory(self, db, partner1, jv1_actor):
        with pytest.raises(Forbidden):
            DirectoryService().assign_partner_jv(partner1.id, jv1_actor, jv_id=None)
