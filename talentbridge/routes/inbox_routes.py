"""JV inbox routes: proposals awaiting the caller's JV."""

import logging

from flask import Blueprint, g, jsonify, request

from talentbridge.middleware.auth import require_auth
from talentbridge.schemas.lifecycle_schema import AcceptSchema, RejectSchema
from talentbridge.services import AllocationService

logger = logging.getLogger(__name__)

inbox_bp = Blueprint("inbox", __name__, url_prefix="/api/inbox")


@inbox_bp.route("", methods=["GET"])
@require_auth
def list_inbox():
    candidates = AllocationService.list_inbox(g.actor)
    return jsonify([candidate.to_dict(include_jvs=True) for candidate in candidates]), 200


@inbox_bp.route("/<int:candidate_id>/accept", methods=["POST"])
@require_auth
def accept_candidate(candidate_id: int):
    """
    Accept a proposal; the candidate starts ONBOARDING with this JV.

    Request Body: AcceptSchema
    """
    data = AcceptSchema.model_validate(request.get_json(silent=True) or {})
    result = AllocationService().accept(candidate_id, g.actor, data.expected_start_date)
    return jsonify(result.to_dict("Candidate accepted")), 200


@inbox_bp.route("/<int:candidate_id>/reject", methods=["POST"])
@require_auth
def reject_candidate(candidate_id: int):
    """
    Decline a proposal; the candidate returns to READY.

    Request Body: RejectSchema
    """
    data = RejectSchema.model_validate(request.get_json(silent=True) or {})
    result = AllocationService().reject(candidate_id, g.actor, data.reason)
    return jsonify(result.to_dict("Candidate rejected")), 200
