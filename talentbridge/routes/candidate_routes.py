"""HQ candidate routes: pool management, allocation, status and history."""

import logging

from flask import Blueprint, current_app, g, jsonify, request

from talentbridge.middleware.auth import require_auth
from talentbridge.schemas.candidate_schema import (
    CandidateCreateSchema,
    CandidateUpdateSchema,
    CommentCreateSchema,
)
from talentbridge.schemas.lifecycle_schema import AllocateSchema, StatusChangeSchema
from talentbridge.services import (
    AllocationService,
    AuditLogService,
    CandidateService,
    CommentService,
    LifecycleService,
    PerformanceService,
)
from talentbridge.services.authorization_policy import Operation

logger = logging.getLogger(__name__)

candidate_bp = Blueprint("candidates", __name__, url_prefix="/api/candidates")


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


@candidate_bp.route("", methods=["GET"])
@require_auth
def list_candidates():
    """
    List candidates visible to the caller.

    Query params: status, jv_id, search, page, page_size, sort_field, sort_dir.
    When page_size is given the total is returned in X-Total-Count.
    """
    items, total = CandidateService.list_candidates(
        g.actor,
        status=request.args.get("status") or None,
        jv_id=request.args.get("jv_id", type=int),
        search=(request.args.get("search") or "").strip() or None,
        page=request.args.get("page", 1, type=int),
        page_size=request.args.get("page_size", 0, type=int),
        sort_field=request.args.get("sort_field") or None,
        sort_dir=(request.args.get("sort_dir") or "asc").lower(),
    )
    response = jsonify([candidate.to_dict(include_jvs=True) for candidate in items])
    if total is not None:
        response.headers["X-Total-Count"] = str(total)
    return response, 200


@candidate_bp.route("", methods=["POST"])
@require_auth
def create_candidate():
    """Add a candidate to the HQ pool (status NEW)."""
    data = CandidateCreateSchema.model_validate(_json_body())
    candidate = CandidateService.create_candidate(g.actor, data.model_dump(exclude_unset=True))
    return jsonify(candidate.to_dict(include_jvs=True)), 201


@candidate_bp.route("/stale", methods=["GET"])
@require_auth
def stale_candidates():
    """Candidates whose status has not moved for the configured threshold."""
    threshold = request.args.get(
        "days", current_app.config.get("STALE_THRESHOLD_DAYS", 90), type=int
    )
    candidates = CandidateService.list_stale(g.actor, threshold_days=threshold)
    return jsonify([candidate.to_dict(include_jvs=True) for candidate in candidates]), 200


@candidate_bp.route("/<int:candidate_id>", methods=["GET"])
@require_auth
def get_candidate(candidate_id: int):
    candidate = CandidateService.get_visible_candidate(candidate_id, g.actor)
    return jsonify(candidate.to_dict(include_jvs=True)), 200


@candidate_bp.route("/<int:candidate_id>", methods=["PUT"])
@require_auth
def update_candidate(candidate_id: int):
    """Update descriptive fields. Status changes go through /status."""
    data = CandidateUpdateSchema.model_validate(_json_body())
    candidate = CandidateService.update_candidate(
        candidate_id, g.actor, data.model_dump(exclude_unset=True)
    )
    return jsonify(candidate.to_dict(include_jvs=True)), 200


@candidate_bp.route("/<int:candidate_id>/allocate", methods=["POST"])
@require_auth
def allocate_candidate(candidate_id: int):
    """
    Propose a READY or RETURNED candidate to a JV.

    Request Body: AllocateSchema
    """
    data = AllocateSchema.model_validate(_json_body())
    result = AllocationService().propose(candidate_id, g.actor, data.target_jv_id, data.note)
    return jsonify(result.to_dict("Candidate allocated")), 200


@candidate_bp.route("/<int:candidate_id>/status", methods=["POST"])
@require_auth
def change_status(candidate_id: int):
    """
    HQ status change.

    Request Body: StatusChangeSchema
    """
    data = StatusChangeSchema.model_validate(_json_body())
    result = LifecycleService().apply_status_change(
        candidate_id, g.actor, data.next_status, data.note, operation=Operation.STATUS_CHANGE_HQ
    )
    return jsonify(result.to_dict("Status updated")), 200


@candidate_bp.route("/<int:candidate_id>/audit", methods=["GET"])
@require_auth
def candidate_audit(candidate_id: int):
    """Audit trail, newest first."""
    entries = AuditLogService.list_for_candidate(candidate_id, g.actor)
    return jsonify([entry.to_dict(include_actor=True) for entry in entries]), 200


@candidate_bp.route("/<int:candidate_id>/reviews", methods=["GET"])
@require_auth
def candidate_reviews(candidate_id: int):
    reviews = PerformanceService.list_reviews(candidate_id, g.actor)
    return jsonify([review.to_dict(include_reviewer=True) for review in reviews]), 200


@candidate_bp.route("/<int:candidate_id>/allocations", methods=["GET"])
@require_auth
def candidate_allocations(candidate_id: int):
    """Handoff history between HQ and JVs, oldest first."""
    candidate = CandidateService.get_visible_candidate(candidate_id, g.actor)
    records = AllocationService.get_history(candidate)
    return jsonify([record.to_dict() for record in records]), 200


@candidate_bp.route("/<int:candidate_id>/comments", methods=["GET"])
@require_auth
def list_comments(candidate_id: int):
    comments = CommentService.list_comments(candidate_id, g.actor)
    return jsonify([comment.to_dict() for comment in comments]), 200


@candidate_bp.route("/<int:candidate_id>/comments", methods=["POST"])
@require_auth
def add_comment(candidate_id: int):
    data = CommentCreateSchema.model_validate(_json_body())
    comment = CommentService.add_comment(candidate_id, g.actor, data.content)
    return jsonify(comment.to_dict()), 201
