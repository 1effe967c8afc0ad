# tests/test_properties.py

"""
Tests for properties, units and soft deletion.
"""

from conftest import auth_headers
from models import AuditLog, Property, Tenant, Unit
from models.enums import TenantStatus


def record_payment(client, user, tenant, amount=150000, month=3):
    return client.post(
        "/api/payments",
        json={"tenantId": tenant.id, "amount": amount, "periodMonth": month, "periodYear": 2026, "paymentMethod": "momo"},
        headers=auth_headers(user),
    )


class TestProperties:

    def test_create_property(self, client, db, owner):
        response = client.post(
            "/api/properties",
            json={"name": "Nyarutarama Villas", "type": "house", "address": "KG 9 Ave"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["userId"] == owner.id
        assert data["city"] == "Kigali"
        assert data["totalUnits"] == 0
        assert db.query(AuditLog).filter(AuditLog.action == "property.create").count() == 1

    def test_owner_id_ignored_for_non_admin(self, client, owner, other_owner):
        response = client.post(
            "/api/properties",
            json={"name": "Hijack", "address": "KN 3 Rd", "ownerId": other_owner.id},
            headers=auth_headers(owner),
        )

        assert response.json()["data"]["userId"] == owner.id

    def test_unit_counts(self, client, owner, property_, tenant):
        response = client.get(f"/api/properties/{property_.id}", headers=auth_headers(owner))

        data = response.json()["data"]
        assert data["totalUnits"] == 1
        assert data["occupiedUnits"] == 1

    def test_duplicate_unit_number_rejected(self, client, owner, property_, unit):
        response = client.post(
            "/api/units",
            json={"propertyId": property_.id, "unitNumber": unit.unit_number, "monthlyRent": 90000},
            headers=auth_headers(owner),
        )

        assert response.status_code == 409

    def test_deleting_unit_moves_tenant_out(self, client, db, owner, unit, tenant):
        response = client.delete(f"/api/units/{unit.id}", headers=auth_headers(owner))

        assert response.status_code == 200
        db.expire_all()
        assert db.get(Unit, unit.id) is None
        moved = db.get(Tenant, tenant.id)
        assert moved.unit_id is None
        assert moved.status == TenantStatus.EXITED
        assert db.query(AuditLog).filter(AuditLog.action == "unit.delete").count() == 1


class TestSoftDelete:

    def test_deleted_property_hidden_from_lists(self, client, db, owner, property_):
        response = client.delete(f"/api/properties/{property_.id}", headers=auth_headers(owner))

        assert response.status_code == 200
        assert client.get("/api/properties", headers=auth_headers(owner)).json()["data"] == []
        assert client.get(f"/api/properties/{property_.id}", headers=auth_headers(owner)).status_code == 404
        db.expire_all()
        assert db.get(Property, property_.id).is_deleted is True

    def test_payment_still_resolves_deleted_property(self, client, owner, property_, tenant):
        payment_id = record_payment(client, owner, tenant).json()["data"]["id"]
        client.delete(f"/api/properties/{property_.id}", headers=auth_headers(owner))

        response = client.get(f"/api/payments/{payment_id}", headers=auth_headers(owner))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["propertyName"] == "Kacyiru Heights"
        assert data["propertyAddress"] == "KG 7 Ave, Kacyiru"

    def test_restore_is_admin_only(self, client, owner, super_admin, property_):
        client.delete(f"/api/properties/{property_.id}", headers=auth_headers(owner))

        forbidden = client.post(f"/api/properties/{property_.id}/restore", headers=auth_headers(owner))
        deleted = client.get("/api/properties/deleted", headers=auth_headers(super_admin))
        restored = client.post(f"/api/properties/{property_.id}/restore", headers=auth_headers(super_admin))

        assert forbidden.status_code == 403
        assert [p["id"] for p in deleted.json()["data"]] == [property_.id]
        assert restored.status_code == 200
        assert restored.json()["data"]["isDeleted"] is False


class TestPayments:

    def test_payment_denormalizes_names(self, client, owner, tenant, unit):
        response = record_payment(client, owner, tenant)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["amount"] == 150000
        assert data["tenantName"] == "Aline Uwase"
        assert data["unitNumber"] == unit.unit_number
        assert data["paymentMethod"] == "momo"

    def test_period_month_out_of_range(self, client, owner, tenant):
        response = record_payment(client, owner, tenant, month=13)

        assert response.status_code == 400

    def test_tenant_reads_own_payments(self, client, owner, tenant_user, tenant):
        record_payment(client, owner, tenant)

        response = client.get("/api/payments", headers=auth_headers(tenant_user))

        assert response.status_code == 200
        assert len(response.json()["data"]) == 1
