# tests/test_reports.py

"""
Tests for the dashboard and the revenue / occupancy reports.
"""

from datetime import date
from decimal import Decimal

import pytest

from conftest import assign_manager, auth_headers
from models import MaintenanceTicket, Payment, Property, Unit
from models.enums import PaymentMethod, PropertyType, TicketCategory, UnitStatus
from services.report_service import default_revenue_window


def pay(db, tenant, amount, paid_on, method=PaymentMethod.MOMO) -> Payment:
    payment = Payment(
        tenant_id=tenant.id,
        unit_id=tenant.unit_id,
        amount=Decimal(amount),
        payment_method=method,
        payment_date=paid_on,
        period_month=paid_on.month,
        period_year=paid_on.year,
    )
    db.add(payment)
    db.commit()
    return payment


@pytest.fixture
def vacant_unit(db, property_) -> Unit:
    unit = Unit(property_id=property_.id, unit_number="B1", monthly_rent=Decimal("100000"), status=UnitStatus.VACANT)
    db.add(unit)
    db.commit()
    return unit


class TestDashboard:

    @pytest.fixture
    def busy_property(self, db, tenant, vacant_unit):
        pay(db, tenant, 150000, date.today())
        db.add(MaintenanceTicket(unit_id=tenant.unit_id, tenant_id=tenant.id,
                                 category=TicketCategory.PLUMBING, description="Leaking sink"))
        db.commit()

    def test_owner_overview(self, client, owner, busy_property):
        response = client.get("/api/dashboard/stats", headers=auth_headers(owner))

        assert response.status_code == 200
        data = response.json()["data"]
        overview = data["overview"]
        assert overview["totalProperties"] == 1
        assert overview["totalUnits"] == 2
        assert overview["occupiedUnits"] == 1
        assert overview["vacantUnits"] == 1
        assert overview["occupancyRate"] == 50
        assert overview["activeTenants"] == 1
        assert overview["totalRevenue"] == 150000
        assert overview["pendingMaintenance"] == 1
        assert data["recentPayments"][0]["tenantName"] == "Aline Uwase"
        assert data["recentMaintenance"][0]["propertyName"] == "Kacyiru Heights"
        assert data["currentPeriod"] == {"month": date.today().month, "year": date.today().year}

    def test_other_owner_sees_nothing(self, client, other_owner, busy_property):
        overview = client.get("/api/dashboard/stats", headers=auth_headers(other_owner)).json()["data"]["overview"]

        assert overview["totalUnits"] == 0
        assert overview["totalRevenue"] == 0
        assert overview["pendingMaintenance"] == 0

    def test_manager_figures_follow_capabilities(self, client, db, manager, property_, busy_property):
        assign_manager(db, property_, manager, can_view_payments=False, can_view_maintenance=False)

        data = client.get("/api/dashboard/stats", headers=auth_headers(manager)).json()["data"]

        assert data["overview"]["totalUnits"] == 2
        assert data["overview"]["activeTenants"] == 1
        assert data["overview"]["totalRevenue"] == 0
        assert data["overview"]["pendingMaintenance"] == 0
        assert data["recentPayments"] == []
        assert data["recentMaintenance"] == []

    def test_tenant_is_forbidden(self, client, tenant_user, tenant):
        assert client.get("/api/dashboard/stats", headers=auth_headers(tenant_user)).status_code == 403


class TestRevenueReport:

    @pytest.fixture
    def payments(self, db, tenant):
        pay(db, tenant, 100000, date(2026, 1, 10))
        pay(db, tenant, 50000, date(2026, 1, 20), method=PaymentMethod.CASH)
        pay(db, tenant, 150000, date(2026, 2, 5))
        pay(db, tenant, 99999, date(2024, 1, 1))

    def test_grouped_by_month(self, client, owner, payments):
        response = client.get(
            "/api/reports/revenue",
            params={"startDate": "2026-01-01", "endDate": "2026-02-28"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 200
        report = response.json()["data"]
        assert report["totalRevenue"] == 300000
        assert report["paymentCount"] == 3
        assert report["averagePayment"] == 100000
        january, february = report["periodData"]
        assert january["period"] == "2026-01"
        assert january["count"] == 2
        assert january["byMethod"] == {"momo": 100000, "cash": 50000}
        assert february["total"] == 150000

    def test_inverted_window_is_400(self, client, owner):
        response = client.get(
            "/api/reports/revenue",
            params={"startDate": "2026-03-01", "endDate": "2026-01-01"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400

    def test_foreign_property_filter_is_empty(self, client, other_owner, property_, payments):
        response = client.get(
            "/api/reports/revenue",
            params={"startDate": "2026-01-01", "endDate": "2026-02-28", "propertyId": property_.id},
            headers=auth_headers(other_owner),
        )

        assert response.json()["data"]["paymentCount"] == 0

    def test_manager_needs_view_payments_for_property_filter(self, client, db, manager, property_):
        assign_manager(db, property_, manager, can_view_payments=False)

        response = client.get(
            "/api/reports/revenue", params={"propertyId": property_.id}, headers=auth_headers(manager)
        )

        assert response.status_code == 403

    def test_default_window_is_twelve_months(self):
        assert default_revenue_window(date(2026, 10, 17)) == (date(2025, 10, 1), date(2026, 10, 17))


class TestOccupancyReport:

    def test_per_property_and_totals(self, client, db, owner, tenant, vacant_unit):
        db.add(Property(user_id=owner.id, name="Remera Lofts", type=PropertyType.HOUSE, address="KG 11 Ave"))
        db.commit()

        response = client.get("/api/reports/occupancy", headers=auth_headers(owner))

        assert response.status_code == 200
        report = response.json()["data"]
        heights, lofts = report["properties"]
        assert heights["name"] == "Kacyiru Heights"
        assert heights["units"] == {"total": 2, "occupied": 1, "vacant": 1, "maintenance": 0, "occupancyRate": 50}
        assert heights["revenue"] == {"potential": 250000, "actual": 150000, "loss": 100000}
        assert lofts["units"]["total"] == 0
        assert lofts["units"]["occupancyRate"] == 0
        assert report["totals"]["overallOccupancyRate"] == 50
        assert report["totals"]["revenueLoss"] == 100000

    def test_agent_is_forbidden(self, client, agent):
        assert client.get("/api/reports/occupancy", headers=auth_headers(agent)).status_code == 403
