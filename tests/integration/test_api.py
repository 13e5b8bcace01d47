"""Tests for the HTTP API: auth, candidates, allocation handoff and team management."""

import pytest
from sqlalchemy import select

from talentbridge.models import AuditLog, Candidate, CandidateStatus, Notification


@pytest.mark.integration
class TestAuthApi:
    """Login, current user and logout"""

    def test_login_and_me(self, client, partner1):
        response = client.post("/api/auth/login", json={"email": partner1.email, "password": "password123"})
        assert response.status_code == 200
        token = response.get_json()["access_token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        data = me.get_json()
        assert me.status_code == 200
        assert data["role"] == "JV_PARTNER"
        assert data["jv"]["name"] == "TechCorp"

    def test_bad_credentials(self, client, partner1):
        response = client.post("/api/auth/login", json={"email": partner1.email, "password": "wrong"})

        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid email or password"

    def test_login_validation_error(self, client):
        response = client.post("/api/auth/login", json={"email": "x"})
        data = response.get_json()

        assert response.status_code == 400
        assert data["error"] == "InvalidInput"
        assert "validation_errors" in data["details"]

    def test_malformed_header(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Token abc"})
        assert response.status_code == 401

    def test_logout(self, client, partner1, auth_headers):
        response = client.post("/api/auth/logout", headers=auth_headers(partner1))
        assert response.status_code == 200

    def test_change_password_camel_case(self, client, partner1, auth_headers):
        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "password123", "newPassword": "short"},
            headers=auth_headers(partner1),
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidInput"


@pytest.mark.integration
class TestCandidateApi:
    """HQ pool management"""

    def test_create_and_fetch(self, client, hq_admin, auth_headers):
        headers = auth_headers(hq_admin)
        response = client.post("/api/candidates", json={
            "name": "Dana Koh",
            "email": "Dana@Example.com",
            "functionRole": "Data Engineer",
            "tags": ["Data"],
        }, headers=headers)

        assert response.status_code == 201
        created = response.get_json()
        assert created["status"] == "NEW"
        assert created["email"] == "dana@example.com"
        assert created["function_role"] == "Data Engineer"

        fetched = client.get(f"/api/candidates/{created['id']}", headers=headers)
        assert fetched.get_json()["name"] == "Dana Koh"

    def test_create_rejects_lifecycle_fields(self, client, hq_admin, auth_headers):
        response = client.post(
            "/api/candidates",
            json={"name": "Eve", "status": "CONFIRMED"},
            headers=auth_headers(hq_admin),
        )

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidInput"

    def test_partner_cannot_create(self, client, partner1, auth_headers):
        response = client.post("/api/candidates", json={"name": "Eve"}, headers=auth_headers(partner1))

        assert response.status_code == 403
        assert response.get_json()["error"] == "Forbidden"

    def test_list_with_pagination_header(self, client, hq_admin, make_candidate, auth_headers):
        for name in ("Ann Lee", "Bob Ong", "Cat Ng"):
            make_candidate(status=CandidateStatus.READY, name=name)

        response = client.get(
            "/api/candidates?page=2&page_size=2&sort_field=name&sort_dir=asc",
            headers=auth_headers(hq_admin),
        )

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "3"
        assert [c["name"] for c in response.get_json()] == ["Cat Ng"]

    def test_partner_list_is_filtered(self, client, partner2, jv1, make_candidate, auth_headers):
        make_candidate(status=CandidateStatus.PROBATION, current_jv=jv1)

        response = client.get("/api/candidates", headers=auth_headers(partner2))

        assert response.get_json() == []

    def test_hidden_candidate_is_forbidden(self, client, partner2, jv1, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.PROBATION, current_jv=jv1)

        response = client.get(f"/api/candidates/{candidate.id}", headers=auth_headers(partner2))

        assert response.status_code == 403

    def test_update(self, client, hq_admin, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.READY)

        response = client.put(
            f"/api/candidates/{candidate.id}",
            json={"interviewNotes": "Great system design round"},
            headers=auth_headers(hq_admin),
        )

        assert response.status_code == 200
        assert response.get_json()["interview_notes"] == "Great system design round"

    def test_status_change_and_audit(self, client, hq_admin, make_candidate, auth_headers):
        headers = auth_headers(hq_admin)
        candidate = make_candidate(status=CandidateStatus.NEW)

        response = client.post(
            f"/api/candidates/{candidate.id}/status",
            json={"nextStatus": "INTERVIEWING", "note": "Booked"},
            headers=headers,
        )
        assert response.status_code == 200
        body = response.get_json()
        assert body["candidate"]["status"] == "INTERVIEWING"
        assert body["warnings"] == []

        client.post(f"/api/candidates/{candidate.id}/status", json={"next_status": "READY"}, headers=headers)

        audit = client.get(f"/api/candidates/{candidate.id}/audit", headers=headers).get_json()
        assert [entry["after"]["status"] for entry in audit] == ["READY", "INTERVIEWING"]
        assert audit[0]["actor"]["id"] == hq_admin.id

    def test_invalid_transition_envelope(self, client, hq_admin, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.NEW)

        response = client.post(
            f"/api/candidates/{candidate.id}/status",
            json={"next_status": "CONFIRMED"},
            headers=auth_headers(hq_admin),
        )
        data = response.get_json()

        assert response.status_code == 400
        assert data["error"] == "InvalidTransition"
        assert data["details"] == {"current_status": "NEW", "next_status": "CONFIRMED"}

    def test_stale_list(self, client, hq_admin, partner1, auth_headers):
        assert client.get("/api/candidates/stale", headers=auth_headers(hq_admin)).status_code == 200
        assert client.get("/api/candidates/stale", headers=auth_headers(partner1)).status_code == 403

    def test_comments(self, client, hq_admin, make_candidate, auth_headers):
        headers = auth_headers(hq_admin)
        candidate = make_candidate(status=CandidateStatus.READY)

        created = client.post(
            f"/api/candidates/{candidate.id}/comments", json={"content": "Call back Friday"}, headers=headers
        )
        assert created.status_code == 201

        thread = client.get(f"/api/candidates/{candidate.id}/comments", headers=headers).get_json()
        assert [c["content"] for c in thread] == ["Call back Friday"]


@pytest.mark.integration
class TestAllocationFlow:
    """Full handoff: HQ proposes, JV accepts, JV manages, JV returns"""

    def test_full_lifecycle(self, db, client, hq_admin, partner1, partner2, jv1, make_candidate, auth_headers):
        hq = auth_headers(hq_admin)
        jv1_headers = auth_headers(partner1)
        jv2_headers = auth_headers(partner2)
        candidate = make_candidate(status=CandidateStatus.READY)

        # HQ proposes to JV1
        response = client.post(
            f"/api/candidates/{candidate.id}/allocate",
            json={"targetJvId": jv1.id, "note": "Good fit"},
            headers=hq,
        )
        assert response.status_code == 200
        assert response.get_json()["candidate"]["pending_jv"]["name"] == "TechCorp"

        # Only JV1 sees it in its inbox
        assert [c["id"] for c in client.get("/api/inbox", headers=jv1_headers).get_json()] == [candidate.id]
        assert client.get("/api/inbox", headers=jv2_headers).get_json() == []

        # JV2 cannot accept
        response = client.post(
            f"/api/inbox/{candidate.id}/accept", json={"expectedStartDate": "2025-01-01"}, headers=jv2_headers
        )
        assert response.status_code == 404

        # JV1 accepts
        response = client.post(
            f"/api/inbox/{candidate.id}/accept", json={"expectedStartDate": "2025-01-01"}, headers=jv1_headers
        )
        assert response.status_code == 200
        accepted = response.get_json()["candidate"]
        assert accepted["status"] == "ONBOARDING"
        assert accepted["current_jv_id"] == jv1.id
        assert accepted["pending_jv_id"] is None
        assert accepted["expected_start_date"] == "2025-01-01"

        # A second accept finds nothing
        again = client.post(
            f"/api/inbox/{candidate.id}/accept", json={"expectedStartDate": "2025-01-01"}, headers=jv1_headers
        )
        assert again.status_code == 404

        # Team view, status progression and a review
        assert [c["id"] for c in client.get("/api/team", headers=jv1_headers).get_json()] == [candidate.id]
        response = client.post(f"/api/team/{candidate.id}/status", json={"nextStatus": "PROBATION"}, headers=jv1_headers)
        assert response.status_code == 200

        response = client.post(
            f"/api/team/{candidate.id}/reviews",
            json={"rating": 5, "summary": "Great start", "needHqIntervention": False, "reviewDate": "2025-02-01"},
            headers=jv1_headers,
        )
        assert response.status_code == 201
        assert response.get_json()["candidate"]["performance_rating"] == 5

        # JV may not terminate
        response = client.post(f"/api/team/{candidate.id}/status", json={"nextStatus": "TERMINATED"}, headers=jv1_headers)
        assert response.status_code == 403
        assert response.get_json()["message"] == "Status cannot be updated by JV"

        # JV returns the candidate from CONFIRMED
        client.post(f"/api/team/{candidate.id}/status", json={"nextStatus": "CONFIRMED"}, headers=jv1_headers)
        response = client.post(f"/api/team/{candidate.id}/status", json={"nextStatus": "RETURNED"}, headers=jv1_headers)
        returned = response.get_json()["candidate"]
        assert returned["status"] == "RETURNED"
        assert returned["current_jv_id"] is None

        # JV1 can no longer see the candidate
        assert client.get(f"/api/candidates/{candidate.id}", headers=jv1_headers).status_code == 403

        history = client.get(f"/api/candidates/{candidate.id}/allocations", headers=hq).get_json()
        assert [h["action"] for h in history] == ["ALLOCATE", "ACCEPT", "RETURN"]

        reviews = client.get(f"/api/candidates/{candidate.id}/reviews", headers=hq).get_json()
        assert [r["rating"] for r in reviews] == [5]

        # One audit entry per transition
        actions = list(db.session.scalars(
            select(AuditLog.action).where(AuditLog.entity_id == candidate.id).order_by(AuditLog.id)
        ))
        assert actions == ["ALLOCATE", "JV_ACCEPT", "JV_STATUS", "JV_STATUS", "JV_STATUS"]

        # HQ heard about the acceptance and the return
        hq_types = [n["type"] for n in client.get("/api/notifications", headers=hq).get_json()]
        assert hq_types == ["candidate.returned", "candidate.accepted"]

    def test_reject_requires_reason(self, client, partner1, jv1, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.PENDING_ACCEPTANCE, pending_jv=jv1)

        response = client.post(f"/api/inbox/{candidate.id}/reject", json={}, headers=auth_headers(partner1))

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidInput"

    def test_reject(self, db, client, hq_admin, partner1, jv1, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.PENDING_ACCEPTANCE, pending_jv=jv1)

        response = client.post(
            f"/api/inbox/{candidate.id}/reject", json={"reason": "No headcount"}, headers=auth_headers(partner1)
        )

        assert response.status_code == 200
        assert response.get_json()["candidate"]["status"] == "READY"
        db.session.expire_all()
        assert db.session.get(Candidate, candidate.id).pending_jv_id is None

    def test_allocate_needs_target(self, client, hq_admin, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.READY)

        response = client.post(f"/api/candidates/{candidate.id}/allocate", json={}, headers=auth_headers(hq_admin))

        assert response.status_code == 400


@pytest.mark.integration
class TestNotificationAndDirectoryApi:

    def test_mark_read(self, db, client, partner1, auth_headers):
        note = Notification(user_id=partner1.id, type="candidate.allocated", payload={"candidate_id": 1})
        db.session.add(note)
        db.session.commit()
        headers = auth_headers(partner1)

        response = client.post(f"/api/notifications/{note.id}/read", headers=headers)
        assert response.status_code == 200
        assert response.get_json()["is_read"] is True

        unread = client.get("/api/notifications?unread_only=true", headers=headers)
        assert unread.get_json() == []
        assert unread.headers["X-Unread-Count"] == "0"

    def test_jvs(self, client, hq_admin, partner1, jv2, auth_headers):
        assert len(client.get("/api/jvs", headers=auth_headers(hq_admin)).get_json()) == 2
        assert [jv["name"] for jv in client.get("/api/jvs", headers=auth_headers(partner1)).get_json()] == ["TechCorp"]

    def test_unlink_partner_expires_proposals(self, client, hq_admin, partner1, jv1, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.PENDING_ACCEPTANCE, pending_jv=jv1)

        response = client.put(f"/api/users/{partner1.id}/jv", json={"jvId": None}, headers=auth_headers(hq_admin))

        assert response.status_code == 200
        body = response.get_json()
        assert body["user"]["jv_id"] is None
        assert body["expired_candidate_ids"] == [candidate.id]

    def test_unlinked_partner_token_sees_nothing(self, client, hq_admin, partner1, jv1, make_candidate, auth_headers):
        make_candidate(status=CandidateStatus.PROBATION, current_jv=jv1)
        partner_headers = auth_headers(partner1)

        client.put(f"/api/users/{partner1.id}/jv", json={"jv_id": None}, headers=auth_headers(hq_admin))

        assert client.get("/api/team", headers=partner_headers).get_json() == []


@pytest.mark.integration
class TestRouteRoleGates:
    """Each mutating route serves one role; the other role is refused before anything changes"""

    @pytest.mark.parametrize(
        "caller, path, body, status, placement",
        [
            pytest.param(
                "partner1", "/api/candidates/{id}/status", {"nextStatus": "PIP"},
                CandidateStatus.CONFIRMED, "current", id="jv-on-hq-status-route",
            ),
            pytest.param(
                "hq_admin", "/api/team/{id}/status", {"nextStatus": "TERMINATED"},
                CandidateStatus.NEW, None, id="hq-on-team-status-route",
            ),
            pytest.param(
                "partner1", "/api/candidates/{id}/allocate", {"targetJvId": "{jv}"},
                CandidateStatus.READY, None, id="jv-on-allocate-route",
            ),
            pytest.param(
                "hq_admin", "/api/inbox/{id}/accept", {"expectedStartDate": "2025-01-01"},
                CandidateStatus.PENDING_ACCEPTANCE, "pending", id="hq-on-accept-route",
            ),
            pytest.param(
                "hq_admin", "/api/inbox/{id}/reject", {"reason": "No budget"},
                CandidateStatus.PENDING_ACCEPTANCE, "pending", id="hq-on-reject-route",
            ),
        ],
    )
    def test_wrong_role_is_forbidden(
        self, request, db, client, jv1, hq_admin, partner1, make_candidate, auth_headers,
        caller, path, body, status, placement,
    ):
        candidate = make_candidate(
            status=status,
            current_jv=jv1 if placement == "current" else None,
            pending_jv=jv1 if placement == "pending" else None,
        )
        before = (candidate.status, candidate.current_jv_id, candidate.pending_jv_id)
        payload = {key: jv1.id if value == "{jv}" else value for key, value in body.items()}
        user = request.getfixturevalue(caller)

        response = client.post(path.format(id=candidate.id), json=payload, headers=auth_headers(user))

        assert response.status_code == 403
        assert response.get_json()["error"] == "Forbidden"

        db.session.expire_all()
        stored = db.session.get(Candidate, candidate.id)
        assert (stored.status, stored.current_jv_id, stored.pending_jv_id) == before
        assert db.session.scalars(
            select(AuditLog).where(AuditLog.entity_type == "Candidate", AuditLog.entity_id == candidate.id)
        ).all() == []

    def test_hq_status_route_still_serves_hq(self, db, client, hq_admin, jv1, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.CONFIRMED, current_jv=jv1)

        response = client.post(
            f"/api/candidates/{candidate.id}/status", json={"nextStatus": "PIP"}, headers=auth_headers(hq_admin)
        )

        assert response.status_code == 200
        assert response.get_json()["candidate"]["status"] == "PIP"

    def test_accept_with_malformed_date(self, db, client, partner1, jv1, make_candidate, auth_headers):
        candidate = make_candidate(status=CandidateStatus.PENDING_ACCEPTANCE, pending_jv=jv1)

        response = client.post(
            f"/api/inbox/{candidate.id}/accept",
            json={"expectedStartDate": "2025-01-01xyz"},
            headers=auth_headers(partner1),
        )

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidInput"
        db.session.expire_all()
        assert db.session.get(Candidate, candidate.id).status == CandidateStatus.PENDING_ACCEPTANCE


@pytest.mark.integration
class TestProfileApi:
    """Updating the caller's own name and email"""

    def test_update_profile(self, client, partner1, auth_headers):
        headers = auth_headers(partner1)

        response = client.put(
            "/api/auth/profile", json={"name": "Pat Partner", "email": "Pat@TechCorp.com"}, headers=headers
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["name"] == "Pat Partner"
        assert data["email"] == "pat@techcorp.com"
        assert client.get("/api/auth/me", headers=headers).get_json()["email"] == "pat@techcorp.com"

    def test_duplicate_email(self, client, partner1, partner2, auth_headers):
        response = client.put(
            "/api/auth/profile", json={"email": partner2.email}, headers=auth_headers(partner1)
        )

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidInput"

    def test_role_cannot_be_changed(self, client, partner1, auth_headers):
        response = client.put(
            "/api/auth/profile", json={"name": "Pat", "role": "HQ_ADMIN"}, headers=auth_headers(partner1)
        )

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidInput"
