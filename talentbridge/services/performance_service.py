"""Performance Service - record reviews and keep the candidate's rolling rating current."""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from talentbridge import db
from talentbridge.exceptions import ConflictRetry, InvalidInput
from talentbridge.models import PerformanceReview
from talentbridge.services.authorization_policy import Actor, Operation, enforce
from talentbridge.services.candidate_service import CandidateService
from talentbridge.services.lifecycle_service import LifecycleService, parse_iso_date
from talentbridge.services.side_effect_dispatcher import (
    Notice,
    NotificationType,
    Recipients,
    SideEffectDispatcher,
)

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def round_half_up(value) -> int:
    """Round to the nearest integer with .5 going up (3.5 -> 4, 2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_rating(rating) -> int:
    if isinstance(rating, bool):
        raise InvalidInput("Rating must be between 1 and 5")
    try:
        numeric = Decimal(str(rating))
    except (ArithmeticError, ValueError):
        raise InvalidInput("Rating must be between 1 and 5")
    if numeric != numeric.to_integral_value() or not MIN_RATING <= numeric <= MAX_RATING:
        raise InvalidInput("Rating must be between 1 and 5")
    return int(numeric)


class PerformanceService:
    """Service for performance reviews."""

    def __init__(self, dispatcher: Optional[SideEffectDispatcher] = None):
        self.dispatcher = dispatcher or SideEffectDispatcher()

    def record_review(
        self,
        candidate_id: int,
        actor: Actor,
        rating,
        summary: Optional[str] = None,
        need_hq_intervention: bool = False,
        review_date: Union[date, str, None] = None,
    ) -> dict:
        """
        Store a review and recompute the candidate's performance rating.

        The rating becomes round-half-up of the mean of every review for the
        candidate. A review flagged for HQ intervention alerts all HQ admins.

        Returns:
            {"review": PerformanceReview, "candidate": Candidate, "warnings": [...]}
        """
        rating = validate_rating(rating)
        if review_date is None or (isinstance(review_date, str) and not review_date.strip()):
            review_date = date.today()
        else:
            review_date = parse_iso_date(review_date, "review_date")

        # Existence and visibility are checked on a fresh, locked read
        candidate = LifecycleService.load_candidate(candidate_id)
        enforce(actor, Operation.REVIEW_RECORD, candidate)

        try:
            review = PerformanceReview(
                candidate_id=candidate.id,
                reviewer_id=actor.user_id,
                rating=rating,
                summary=summary,
                need_hq_intervention=bool(need_hq_intervention),
                review_date=review_date,
            )
            db.session.add(review)
            db.session.flush()

            average = db.session.scalar(
                select(func.avg(PerformanceReview.rating))
                .where(PerformanceReview.candidate_id == candidate.id)
            )
            candidate.performance_rating = round_half_up(average if average is not None else rating)
            candidate.performance_notes = summary
            db.session.commit()
        except StaleDataError:
            db.session.rollback()
            raise ConflictRetry(
                "Candidate was modified by another request; reload and try again",
                {"candidate_id": candidate_id},
            )
        except SQLAlchemyError:
            db.session.rollback()
            logger.error(f"Failed to record review for candidate {candidate_id}", exc_info=True)
            raise

        logger.info(
            f"Review recorded for candidate {candidate.id} by {actor.audit_ref}: "
            f"rating={rating}, aggregate={candidate.performance_rating}"
        )

        warnings = []
        if need_hq_intervention:
            result = self.dispatcher.notify(Notice(
                NotificationType.PERFORMANCE_ALERT,
                [Recipients.hq()],
                {
                    "candidate_id": candidate.id,
                    "candidate_name": candidate.name,
                    "rating": rating,
                    "summary": summary,
                },
            ))
            warnings = result.warnings

        return {"review": review, "candidate": candidate, "warnings": warnings}

    @staticmethod
    def list_reviews(candidate_id: int, actor: Actor) -> List[PerformanceReview]:
        """Reviews for a visible candidate, most recent first."""
        candidate = CandidateService.get_visible_candidate(candidate_id, actor)
        return list(db.session.scalars(
            select(PerformanceReview)
            .where(PerformanceReview.candidate_id == candidate.id)
            .order_by(PerformanceReview.review_date.desc(), PerformanceReview.id.desc())
        ))
