"""Directory routes: joint ventures and partner membership."""

import logging

from flask import Blueprint, g, jsonify, request

from talentbridge.middleware.auth import require_auth
from talentbridge.schemas.user_schema import PartnerAssignmentSchema
from talentbridge.services import DirectoryService

logger = logging.getLogger(__name__)

directory_bp = Blueprint("directory", __name__, url_prefix="/api")


@directory_bp.route("/jvs", methods=["GET"])
@require_auth
def list_jvs():
    jvs = DirectoryService.list_jvs(g.actor)
    return jsonify([jv.to_dict() for jv in jvs]), 200


@directory_bp.route("/users/<int:user_id>/jv", methods=["PUT"])
@require_auth
def assign_partner_jv(user_id: int):
    """
    Relink, unlink or (de)activate a partner user.

    Request Body: PartnerAssignmentSchema. Proposals pending for a JV left
    without active partners expire back to READY.
    """
    data = PartnerAssignmentSchema.model_validate(request.get_json(silent=True) or {})
    kwargs = data.model_dump(exclude_unset=True)
    result = DirectoryService().assign_partner_jv(user_id, g.actor, **kwargs)
    return jsonify({
        "message": "User updated",
        "user": result["user"].to_dict(),
        "expired_candidate_ids": result["expired"],
        "warnings": result["warnings"],
    }), 200
