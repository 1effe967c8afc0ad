# tests/test_access.py

"""
Tests for role and scope enforcement across owners, managers and tenants.
"""

from conftest import assign_manager, auth_headers
from models.enums import ManagerStatus
from services.permissions import DEFAULT_MANAGER_PERMISSIONS, parse_permissions


class TestOwnerScope:

    def test_owner_sees_own_property(self, client, owner, property_):
        response = client.get("/api/properties", headers=auth_headers(owner))

        assert response.status_code == 200
        body = response.json()
        assert [p["id"] for p in body["data"]] == [property_.id]
        assert body["pagination"]["total"] == 1

    def test_other_owner_gets_404_not_403(self, client, other_owner, property_):
        response = client.get(f"/api/properties/{property_.id}", headers=auth_headers(other_owner))

        assert response.status_code == 404

    def test_other_owner_list_is_empty(self, client, other_owner, property_):
        response = client.get("/api/properties", headers=auth_headers(other_owner))

        assert response.json()["data"] == []


class TestManagerScope:

    def test_pending_assignment_grants_nothing(self, client, db, manager, property_):
        assign_manager(db, property_, manager, status=ManagerStatus.PENDING)

        listing = client.get("/api/properties", headers=auth_headers(manager))
        detail = client.get(f"/api/properties/{property_.id}", headers=auth_headers(manager))

        assert listing.json()["data"] == []
        assert detail.status_code == 404

    def test_active_assignment_grants_visibility(self, client, db, manager, property_):
        assign_manager(db, property_, manager)

        response = client.get(f"/api/properties/{property_.id}", headers=auth_headers(manager))

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Kacyiru Heights"

    def test_revoked_assignment_loses_visibility(self, client, db, manager, property_):
        assign_manager(db, property_, manager, status=ManagerStatus.REVOKED)

        response = client.get(f"/api/properties/{property_.id}", headers=auth_headers(manager))

        assert response.status_code == 404

    def test_view_without_record_payments(self, client, db, manager, property_, tenant):
        assign_manager(db, property_, manager, can_view_payments=True, can_record_payments=False)
        headers = auth_headers(manager)

        listing = client.get("/api/payments", headers=headers)
        create = client.post(
            "/api/payments",
            json={"tenantId": tenant.id, "amount": 150000, "periodMonth": 3, "periodYear": 2026},
            headers=headers,
        )

        assert listing.status_code == 200
        assert create.status_code == 403

    def test_record_payments_flag_allows_create(self, client, db, manager, property_, tenant):
        assign_manager(db, property_, manager, can_record_payments=True)

        response = client.post(
            "/api/payments",
            json={"tenantId": tenant.id, "amount": 150000, "periodMonth": 3, "periodYear": 2026},
            headers=auth_headers(manager),
        )

        assert response.status_code == 201
        assert response.json()["data"]["receivedBy"] == manager.id

    def test_property_filter_without_view_flag_is_403(self, client, db, manager, property_):
        assign_manager(db, property_, manager, can_view_payments=False)

        response = client.get(f"/api/payments?propertyId={property_.id}", headers=auth_headers(manager))

        assert response.status_code == 403

    def test_manager_cannot_edit_property_without_flag(self, client, db, manager, property_):
        assign_manager(db, property_, manager, can_edit_property=False)

        response = client.put(
            f"/api/properties/{property_.id}", json={"name": "Renamed"}, headers=auth_headers(manager)
        )

        assert response.status_code == 403

    def test_manager_cannot_create_property(self, client, manager):
        response = client.post(
            "/api/properties", json={"name": "Mine", "address": "KN 1 Rd"}, headers=auth_headers(manager)
        )

        assert response.status_code == 403


class TestTenantScope:

    def test_tenant_sees_only_own_property(self, client, tenant_user, tenant, property_):
        response = client.get("/api/properties", headers=auth_headers(tenant_user))

        assert [p["id"] for p in response.json()["data"]] == [property_.id]

    def test_tenant_cannot_create_payment(self, client, tenant_user, tenant):
        response = client.post(
            "/api/payments",
            json={"tenantId": tenant.id, "amount": 1000, "periodMonth": 1, "periodYear": 2026},
            headers=auth_headers(tenant_user),
        )

        assert response.status_code == 403

    def test_tenant_without_record_sees_nothing(self, client, tenant_user, property_):
        response = client.get("/api/properties", headers=auth_headers(tenant_user))

        assert response.json()["data"] == []


class TestStoredPermissions:

    def test_empty_blob_grants_defaults(self):
        assert parse_permissions(None) == DEFAULT_MANAGER_PERMISSIONS
        assert parse_permissions({}).can_view_tenants is True

    def test_invalid_blob_grants_only_defaults(self):
        parsed = parse_permissions({"can_edit_property": True, "can_launch_rockets": True})

        assert parsed == DEFAULT_MANAGER_PERMISSIONS
        assert parsed.can_edit_property is False

    def test_defaults_are_not_shared(self):
        parsed = parse_permissions(None)
        parsed.can_record_payments = True

        assert DEFAULT_MANAGER_PERMISSIONS.can_record_payments is False
