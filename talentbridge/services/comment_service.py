"""Comment Service - discussion threads on candidates."""

import logging
from typing import List

from sqlalchemy import select

from talentbridge import db
from talentbridge.exceptions import InvalidInput
from talentbridge.models import Comment
from talentbridge.services.authorization_policy import Actor
from talentbridge.services.candidate_service import CandidateService

logger = logging.getLogger(__name__)


class CommentService:

    @staticmethod
    def list_comments(candidate_id: int, actor: Actor) -> List[Comment]:
        candidate = CandidateService.get_visible_candidate(candidate_id, actor)
        return list(db.session.scalars(
            select(Comment)
            .where(Comment.candidate_id == candidate.id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        ))

    @staticmethod
    def add_comment(candidate_id: int, actor: Actor, content: str) -> Comment:
        if not content or not content.strip():
            raise InvalidInput("Content is required")
        candidate = CandidateService.get_visible_candidate(candidate_id, actor)

        comment = Comment(candidate_id=candidate.id, author_id=actor.user_id, content=content.strip())
        db.session.add(comment)
        db.session.commit()
        logger.info(f"Comment {comment.id} added to candidate {candidate.id} by {actor.audit_ref}")
        return comment
