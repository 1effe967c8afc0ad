# tests/test_audit.py

"""
Tests for the append-only audit trail.
"""

import pytest

from conftest import assign_manager, auth_headers
from models import AuditLog
from models.audit_log import AuditLogImmutableError
from models.enums import AuditEntityType
from services import audit_service


class TestImmutability:

    def test_update_is_refused(self, db, owner):
        entry = audit_service.record(db, owner.id, "property.create", AuditEntityType.PROPERTY, 1)
        db.commit()

        entry.action = "property.delete"
        with pytest.raises(AuditLogImmutableError):
            db.commit()
        db.rollback()

        assert db.get(AuditLog, entry.id).action == "property.create"

    def test_delete_is_refused(self, db, owner):
        entry = audit_service.record(db, owner.id, "property.create", AuditEntityType.PROPERTY, 1)
        db.commit()

        db.delete(entry)
        with pytest.raises(AuditLogImmutableError):
            db.commit()
        db.rollback()

        assert db.query(AuditLog).count() == 1


class TestRequestOrigin:

    def test_request_client_is_stamped(self, client, db, owner):
        headers = {**auth_headers(owner), "User-Agent": "renta-web/2.1"}
        client.post("/api/properties", json={"name": "Gisozi Flats", "address": "KG 14 Ave"}, headers=headers)

        entry = db.query(AuditLog).one()
        assert entry.ip_address == "testclient"
        assert entry.user_agent == "renta-web/2.1"

    def test_outside_a_request_is_blank(self, db, owner):
        entry = audit_service.record(db, owner.id, "property.create", AuditEntityType.PROPERTY, 1)
        db.commit()

        assert entry.ip_address is None
        assert entry.user_agent is None


class TestAuditRoutes:

    def test_own_trail(self, client, owner):
        client.post(
            "/api/properties", json={"name": "Gisozi Flats", "address": "KG 14 Ave"}, headers=auth_headers(owner)
        )

        response = client.get("/api/audit", headers=auth_headers(owner))

        assert response.status_code == 200
        actions = [entry["action"] for entry in response.json()["data"]]
        assert actions == ["property.create"]

    def test_entity_trail_requires_visibility(self, client, owner, other_owner, property_):
        client.put(f"/api/properties/{property_.id}", json={"name": "Renamed"}, headers=auth_headers(owner))

        visible = client.get(f"/api/audit/entity/property/{property_.id}", headers=auth_headers(owner))
        hidden = client.get(f"/api/audit/entity/property/{property_.id}", headers=auth_headers(other_owner))

        assert visible.status_code == 200
        assert visible.json()["data"][0]["action"] == "property.update"
        assert visible.json()["data"][0]["metadata"] == {"fields": ["name"]}
        assert hidden.status_code == 404

    def test_system_trail_is_admin_only(self, client, owner):
        response = client.get("/api/audit/entity/system/1", headers=auth_headers(owner))

        assert response.status_code == 403

    def test_all_logs_admin_only(self, client, owner, super_admin):
        assert client.get("/api/audit/all", headers=auth_headers(owner)).status_code == 403
        assert client.get("/api/audit/all", headers=auth_headers(super_admin)).status_code == 200

    def test_manager_entity_trail_follows_capability(self, client, db, manager, property_, tenant):
        assignment = assign_manager(db, property_, manager, can_view_tenants=False)
        url = f"/api/audit/entity/tenant/{tenant.id}"

        denied = client.get(url, headers=auth_headers(manager))
        assignment.permissions = {**assignment.permissions, "can_view_tenants": True}
        db.commit()
        allowed = client.get(url, headers=auth_headers(manager))

        assert denied.status_code == 403
        assert allowed.status_code == 200
