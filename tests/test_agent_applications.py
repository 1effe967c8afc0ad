# tests/test_agent_applications.py

"""
Tests for the public agent application flow and its review by administrators.
"""

import pytest

from conftest import auth_headers, make_user
from models import User
from models.enums import UserRole

APPLICATION = {
    "email": "Eric.Mugisha@example.rw",
    "firstName": "Eric",
    "lastName": "Mugisha",
    "phone": "+250788000111",
    "city": "Kigali",
    "motivation": "I already help landlords in Remera collect rent.",
}


@pytest.fixture
def application_id(client):
    response = client.post("/api/agent-applications", json=APPLICATION)
    assert response.status_code == 201
    return response.json()["data"]["id"]


class TestSubmission:

    def test_submit_is_public(self, client, application_id):
        status = client.get("/api/agent-applications/status", params={"email": "eric.mugisha@example.rw"})

        assert status.status_code == 200
        assert status.json()["data"]["status"] == "pending"

    def test_duplicate_pending_application(self, client, application_id):
        response = client.post("/api/agent-applications", json=APPLICATION)

        assert response.status_code == 409

    def test_existing_account_cannot_apply(self, client, db):
        make_user(db, UserRole.OWNER, "eric.mugisha@example.rw")

        response = client.post("/api/agent-applications", json=APPLICATION)

        assert response.status_code == 409

    def test_unknown_email_status(self, client):
        response = client.get("/api/agent-applications/status", params={"email": "nobody@example.rw"})

        assert response.status_code == 404


class TestReview:

    def test_approve_creates_agent(self, client, db, super_admin, application_id):
        response = client.post(
            f"/api/agent-applications/{application_id}/approve", headers=auth_headers(super_admin)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["application"]["status"] == "approved"
        user = db.get(User, data["userId"])
        assert user.role == UserRole.AGENT
        login = client.post(
            "/api/auth/login",
            json={"email": "eric.mugisha@example.rw", "password": data["temporaryPassword"]},
        )
        assert login.status_code == 200

    def test_reject(self, client, super_admin, application_id):
        response = client.post(
            f"/api/agent-applications/{application_id}/reject",
            json={"reason": "Incomplete references"},
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 200
        assert response.json()["data"]["rejectionReason"] == "Incomplete references"

    def test_review_is_final(self, client, super_admin, application_id):
        client.post(
            f"/api/agent-applications/{application_id}/reject",
            json={"reason": "Incomplete references"},
            headers=auth_headers(super_admin),
        )

        response = client.post(
            f"/api/agent-applications/{application_id}/approve", headers=auth_headers(super_admin)
        )

        assert response.status_code == 400

    def test_owner_cannot_review(self, client, owner, application_id):
        response = client.post(f"/api/agent-applications/{application_id}/approve", headers=auth_headers(owner))

        assert response.status_code == 403

    def test_granted_admin_can_list(self, client, db, application_id):
        reviewer = make_user(db, UserRole.OWNER, "ops@renta.rw", permissions={"manage_agents": True})

        response = client.get("/api/agent-applications", headers=auth_headers(reviewer))

        assert response.status_code == 200
        assert response.json()["pagination"]["total"] == 1
