# tests/test_managers.py

"""
Tests for manager invitations and the manager portal.
"""

from unittest.mock import patch

from conftest import auth_headers
from models import PropertyManager, User
from models.enums import ManagerStatus, UserRole


def invite(client, owner, property_, email="new.manager@renta.rw", **permissions):
    return client.post(
        f"/api/managers/properties/{property_.id}/managers",
        json={"email": email, "firstName": "Eric", "permissions": permissions},
        headers=auth_headers(owner),
    )


class TestInvitations:

    def test_invite_creates_pending_manager_account(self, client, db, owner, property_):
        response = invite(client, owner, property_, canRecordPayments=True)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["permissions"]["canRecordPayments"] is True
        assert data["permissions"]["canEditProperty"] is False

        manager = db.query(User).filter(User.email == "new.manager@renta.rw").one()
        assert manager.role == UserRole.MANAGER

    def test_duplicate_invite_is_409_with_single_row(self, client, db, owner, property_):
        first = invite(client, owner, property_)
        second = invite(client, owner, property_)

        assert first.status_code == 201
        assert second.status_code == 409
        assert db.query(PropertyManager).filter(PropertyManager.property_id == property_.id).count() == 1

    def test_inviting_non_manager_user_is_400(self, client, owner, other_owner, property_):
        response = invite(client, owner, property_, email=other_owner.email)

        assert response.status_code == 400

    def test_only_owner_can_invite(self, client, other_owner, property_):
        response = invite(client, other_owner, property_)

        assert response.status_code in (403, 404)

    def test_unknown_permission_flag_is_rejected(self, client, owner, property_):
        response = invite(client, owner, property_, canDeleteEverything=True)

        assert response.status_code == 400

    def test_revoked_assignment_can_be_reinvited(self, client, db, owner, property_):
        created = invite(client, owner, property_).json()["data"]
        revoked = client.delete(
            f"/api/managers/properties/{property_.id}/managers/{created['managerId']}",
            headers=auth_headers(owner),
        )
        assert revoked.json()["data"]["status"] == "revoked"

        again = invite(client, owner, property_)

        assert again.status_code == 201
        assert again.json()["data"]["status"] == "pending"
        assert db.query(PropertyManager).count() == 1

    def test_racing_invite_for_new_email_is_409(self, client, db, owner, property_):
        first = invite(client, owner, property_)
        # The second request misses the account the first one is creating
        with patch("services.manager_service.get_user_by_email", return_value=None), \
                patch("services.auth_service.get_user_by_email", return_value=None):
            second = invite(client, owner, property_)

        assert first.status_code == 201
        assert second.status_code == 409
        assert db.query(User).filter(User.email == "new.manager@renta.rw").count() == 1

    def test_racing_invite_for_same_manager_is_409(self, client, db, owner, property_, manager):
        first = invite(client, owner, property_, email=manager.email)
        with patch("services.manager_service._find_assignment", return_value=None):
            second = invite(client, owner, property_, email=manager.email)

        assert first.status_code == 201
        assert second.status_code == 409
        assert db.query(PropertyManager).count() == 1


class TestManagerPortal:

    def test_accept_invitation_activates_scope(self, client, db, owner, property_, manager):
        invite(client, owner, property_, email=manager.email)
        headers = auth_headers(manager)

        pending = client.get("/api/manager-portal/assignments?status=pending", headers=headers).json()["data"]
        assert len(pending) == 1
        assert client.get("/api/properties", headers=headers).json()["data"] == []

        accepted = client.post(f"/api/manager-portal/assignments/{pending[0]['id']}/accept", headers=headers)

        assert accepted.status_code == 200
        assert accepted.json()["data"]["status"] == "active"
        managed = client.get("/api/manager-portal/properties", headers=headers).json()["data"]
        assert [p["id"] for p in managed] == [property_.id]
        assert managed[0]["permissions"]["canViewTenants"] is True

    def test_decline_invitation(self, client, db, owner, property_, manager):
        created = invite(client, owner, property_, email=manager.email).json()["data"]

        response = client.post(
            f"/api/manager-portal/assignments/{created['id']}/decline", headers=auth_headers(manager)
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == ManagerStatus.REVOKED.value

    def test_portal_is_manager_only(self, client, owner):
        response = client.get("/api/manager-portal/assignments", headers=auth_headers(owner))

        assert response.status_code == 403
