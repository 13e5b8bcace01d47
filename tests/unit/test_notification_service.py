"""Unit tests for NotificationService and CommentService"""
import pytest

from talentbridge.exceptions import Forbidden, InvalidInput, NotFound
from talentbridge.models import CandidateStatus as S, Notification
from talentbridge.services.comment_service import CommentService
from talentbridge.services.notification_service import NotificationService


@pytest.fixture
def inbox(db, partner1, partner2):
    rows = [Notification(user_id=partner1.id, type="candidate.allocated", payload={"n": i}) for i in range(30)]
    rows.append(Notification(user_id=partner2.id, type="candidate.allocated", payload={"n": "other"}))
    db.session.add_all(rows)
    db.session.commit()
    return rows


@pytest.mark.unit
class TestNotifications:

    def test_list_is_capped_and_newest_first(self, db, inbox, jv1_actor):
        result = NotificationService.list_notifications(jv1_actor)

        assert len(result) == 25
        assert result[0].payload == {"n": 29}
        assert all(n.user_id == jv1_actor.user_id for n in result)

    def test_mark_read_and_unread_filter(self, db, inbox, jv1_actor):
        first = inbox[29]

        marked = NotificationService.mark_as_read(first.id, jv1_actor)

        assert marked.is_read
        stamped_at = marked.read_at
        NotificationService.mark_as_read(first.id, jv1_actor)
        assert marked.read_at == stamped_at

        unread = NotificationService.list_notifications(jv1_actor, unread_only=True)
        assert first.id not in [n.id for n in unread]
        assert NotificationService.unread_count(jv1_actor) == 29

    def test_cannot_mark_someone_elses(self, db, inbox, jv2_actor):
        with pytest.raises(NotFound):
            NotificationService.mark_as_read(inbox[0].id, jv2_actor)


@pytest.mark.unit
class TestComments:

    def test_visible_candidate_thread(self, db, make_candidate, jv1, hq_actor, jv1_actor):
        candidate = make_candidate(status=S.PROBATION, current_jv=jv1)

        CommentService.add_comment(candidate.id, hq_actor, "Please share the onboarding plan")
        CommentService.add_comment(candidate.id, jv1_actor, " Shared in the drive ")

        thread = CommentService.list_comments(candidate.id, jv1_actor)
        assert [c.content for c in thread] == ["Please share the onboarding plan", "Shared in the drive"]
        assert thread[1].author_id == jv1_actor.user_id

    def test_hidden_candidate(self, db, make_candidate, jv1, jv2_actor):
        candidate = make_candidate(status=S.PROBATION, current_jv=jv1)

        with pytest.raises(Forbidden):
            CommentService.add_comment(candidate.id, jv2_actor, "hello")

    def test_empty_comment(self, db, make_candidate, hq_actor):
        candidate = make_candidate(status=S.READY)

        with pytest.raises(InvalidInput):
            CommentService.add_comment(candidate.id, hq_actor, "   ")
