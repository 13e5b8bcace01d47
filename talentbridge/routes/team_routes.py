"""JV team routes: candidates placed with the caller's JV."""

import logging

from flask import Blueprint, g, jsonify, request

from talentbridge.middleware.auth import require_auth
from talentbridge.schemas.lifecycle_schema import ReviewSchema, StatusChangeSchema
from talentbridge.services import CandidateService, LifecycleService, PerformanceService
from talentbridge.services.authorization_policy import Operation

logger = logging.getLogger(__name__)

team_bp = Blueprint("team", __name__, url_prefix="/api/team")


@team_bp.route("", methods=["GET"])
@require_auth
def list_team():
    candidates = CandidateService.list_team(g.actor)
    return jsonify([candidate.to_dict(include_jvs=True) for candidate in candidates]), 200


@team_bp.route("/<int:candidate_id>/status", methods=["POST"])
@require_auth
def update_team_status(candidate_id: int):
    """
    Post-placement status change by the owning JV.

    Request Body: StatusChangeSchema
    """
    data = StatusChangeSchema.model_validate(request.get_json(silent=True) or {})
    result = LifecycleService().apply_status_change(
        candidate_id, g.actor, data.next_status, data.note, operation=Operation.STATUS_CHANGE_JV
    )
    return jsonify(result.to_dict("Status updated")), 200


@team_bp.route("/<int:candidate_id>/reviews", methods=["POST"])
@require_auth
def record_review(candidate_id: int):
    """
    Record a performance review.

    Request Body: ReviewSchema
    """
    data = ReviewSchema.model_validate(request.get_json(silent=True) or {})
    result = PerformanceService().record_review(
        candidate_id,
        g.actor,
        data.rating,
        summary=data.summary,
        need_hq_intervention=data.need_hq_intervention,
        review_date=data.review_date,
    )
    return jsonify({
        "message": "Review recorded",
        "review": result["review"].to_dict(),
        "candidate": result["candidate"].to_dict(include_jvs=True),
        "warnings": result["warnings"],
    }), 201
