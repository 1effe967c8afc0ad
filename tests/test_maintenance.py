# tests/test_maintenance.py

"""
Tests for maintenance tickets: who may open them, the status machine and
staff assignment.
"""

import pytest

from conftest import assign_manager, auth_headers, make_user
from models import Notification, Unit
from models.enums import NotificationType, UserRole


@pytest.fixture
def technician(db):
    return make_user(db, UserRole.MAINTENANCE, "fundi@renta.rw", first_name="Jean", last_name="Habimana")


@pytest.fixture
def ticket_id(client, tenant_user, tenant, unit):
    response = client.post(
        "/api/maintenance",
        json={"unitId": unit.id, "category": "plumbing", "description": "Kitchen sink is leaking", "priority": "high"},
        headers=auth_headers(tenant_user),
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


def set_status(client, user, ticket_id, status):
    return client.patch(f"/api/maintenance/{ticket_id}/status", json={"status": status}, headers=auth_headers(user))


class TestCreate:

    def test_tenant_opens_ticket_for_own_unit(self, client, db, owner, tenant, ticket_id):
        response = client.get(f"/api/maintenance/{ticket_id}", headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json()["data"]["tenantId"] == tenant.id
        assert response.json()["data"]["status"] == "pending"
        alerts = db.query(Notification).filter(
            Notification.user_id == owner.id, Notification.type == NotificationType.MAINTENANCE_NEW
        )
        assert alerts.count() == 1

    def test_tenant_cannot_use_another_unit(self, client, db, tenant_user, tenant, property_):
        other = Unit(property_id=property_.id, unit_number="B2", monthly_rent=120000)
        db.add(other)
        db.commit()

        response = client.post(
            "/api/maintenance",
            json={"unitId": other.id, "category": "electrical", "description": "No power in hallway"},
            headers=auth_headers(tenant_user),
        )

        assert response.status_code == 404

    def test_manager_needs_manage_flag(self, client, db, manager, property_, unit):
        assign_manager(db, property_, manager)

        response = client.post(
            "/api/maintenance",
            json={"unitId": unit.id, "category": "other", "description": "Repaint the stairwell"},
            headers=auth_headers(manager),
        )

        assert response.status_code == 403


class TestStatus:

    def test_happy_path(self, client, owner, ticket_id):
        assert set_status(client, owner, ticket_id, "in_progress").status_code == 200

        response = set_status(client, owner, ticket_id, "completed")

        assert response.status_code == 200
        assert response.json()["data"]["completedAt"] is not None

    def test_completed_is_terminal(self, client, owner, ticket_id):
        set_status(client, owner, ticket_id, "in_progress")
        set_status(client, owner, ticket_id, "completed")

        assert set_status(client, owner, ticket_id, "cancelled").status_code == 400

    def test_cannot_skip_in_progress(self, client, owner, ticket_id):
        assert set_status(client, owner, ticket_id, "completed").status_code == 400

    def test_tenant_cannot_change_status(self, client, tenant_user, ticket_id):
        assert set_status(client, tenant_user, ticket_id, "cancelled").status_code == 403


class TestAssignment:

    def test_assigned_staff_sees_and_progresses_ticket(self, client, owner, technician, ticket_id):
        before = client.get("/api/maintenance", headers=auth_headers(technician))
        assert before.json()["pagination"]["total"] == 0

        assign = client.patch(
            f"/api/maintenance/{ticket_id}/assign", json={"assignedTo": technician.id}, headers=auth_headers(owner)
        )
        assert assign.status_code == 200

        after = client.get("/api/maintenance", headers=auth_headers(technician))
        assert after.json()["pagination"]["total"] == 1
        assert set_status(client, technician, ticket_id, "in_progress").status_code == 200

    def test_only_maintenance_users_can_be_assigned(self, client, owner, manager, ticket_id):
        response = client.patch(
            f"/api/maintenance/{ticket_id}/assign", json={"assignedTo": manager.id}, headers=auth_headers(owner)
        )

        assert response.status_code == 400
