# tests/test_tenants.py

"""
Tests for tenant assignment and move-out, which keep unit status in step.
"""

from decimal import Decimal

import pytest

from conftest import auth_headers
from models import Tenant, Unit
from models.enums import TenantStatus, UnitStatus


@pytest.fixture
def second_unit(db, property_):
    unit = Unit(property_id=property_.id, unit_number="B2", monthly_rent=Decimal("120000"), status=UnitStatus.VACANT)
    db.add(unit)
    db.commit()
    return unit


@pytest.fixture
def unassigned_tenant(db, owner):
    tenant = Tenant(
        user_id=owner.id,
        first_name="Patrick",
        last_name="Nshuti",
        phone="+250788999000",
        status=TenantStatus.ACTIVE,
    )
    db.add(tenant)
    db.commit()
    return tenant


class TestCreateTenant:

    def test_create_into_vacant_unit_occupies_it(self, client, db, owner, second_unit):
        response = client.post(
            "/api/tenants",
            json={"firstName": "Grace", "lastName": "Ingabire", "phone": "+250788555000", "unitId": second_unit.id},
            headers=auth_headers(owner),
        )

        assert response.status_code == 201
        assert response.json()["data"]["unitNumber"] == "B2"
        db.expire_all()
        assert db.get(Unit, second_unit.id).status == UnitStatus.OCCUPIED

    def test_create_into_occupied_unit_is_400(self, client, db, owner, unit, tenant):
        response = client.post(
            "/api/tenants",
            json={"firstName": "Grace", "lastName": "Ingabire", "phone": "+250788555000", "unitId": unit.id},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400
        assert db.query(Tenant).count() == 1


class TestAssignment:

    def test_assign_to_occupied_unit_changes_nothing(self, client, db, owner, unit, tenant, unassigned_tenant):
        response = client.post(
            f"/api/tenants/{unassigned_tenant.id}/assign",
            json={"unitId": unit.id},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400
        db.expire_all()
        assert db.get(Tenant, unassigned_tenant.id).unit_id is None
        assert db.get(Tenant, tenant.id).unit_id == unit.id
        assert db.get(Unit, unit.id).status == UnitStatus.OCCUPIED

    def test_move_between_units(self, client, db, owner, unit, second_unit, tenant):
        response = client.post(
            f"/api/tenants/{tenant.id}/assign",
            json={"unitId": second_unit.id, "leaseStartDate": "2026-02-01"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 200
        db.expire_all()
        assert db.get(Tenant, tenant.id).unit_id == second_unit.id
        assert db.get(Unit, unit.id).status == UnitStatus.VACANT
        assert db.get(Unit, second_unit.id).status == UnitStatus.OCCUPIED

    def test_unassign_vacates_unit(self, client, db, owner, unit, tenant):
        response = client.post(f"/api/tenants/{tenant.id}/unassign", headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "exited"
        db.expire_all()
        assert db.get(Unit, unit.id).status == UnitStatus.VACANT

    def test_unassign_unassigned_tenant_is_400(self, client, owner, unassigned_tenant):
        response = client.post(f"/api/tenants/{unassigned_tenant.id}/unassign", headers=auth_headers(owner))

        assert response.status_code == 400

    def test_update_cannot_clear_unit(self, client, owner, tenant):
        response = client.put(f"/api/tenants/{tenant.id}", json={"status": "exited"}, headers=auth_headers(owner))

        assert response.status_code == 400


class TestBalance:

    def test_balance_counts_payments(self, client, owner, tenant):
        client.post(
            "/api/payments",
            json={"tenantId": tenant.id, "amount": 150000, "periodMonth": 1, "periodYear": 2026},
            headers=auth_headers(owner),
        )

        response = client.get(f"/api/payments/tenant/{tenant.id}/balance", headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json()["data"]["totalPaid"] == 150000
