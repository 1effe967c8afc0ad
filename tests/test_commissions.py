# tests/test_commissions.py

"""
Tests for commission pricing, agent-assisted actions and payouts.
"""

from decimal import Decimal
from unittest.mock import patch

import pytest

from conftest import auth_headers
from models import AgentCommission, AgentTransaction, CommissionRule, Payment
from models.enums import AgentActionType, CommissionStatus, CommissionType
from services.commission_service import calculate_commission_amount


def rule(commission_type, value, min_amount=None, max_amount=None) -> CommissionRule:
    return CommissionRule(
        action_type=AgentActionType.RECORD_PAYMENT.value,
        name="Payment collection",
        commission_type=commission_type,
        commission_value=Decimal(value),
        min_amount=Decimal(min_amount) if min_amount is not None else None,
        max_amount=Decimal(max_amount) if max_amount is not None else None,
        is_active=True,
    )


@pytest.fixture
def payment_rule(db, super_admin) -> CommissionRule:
    saved = rule(CommissionType.PERCENTAGE, "5")
    saved.created_by = super_admin.id
    db.add(saved)
    db.commit()
    return saved


def assisted_payment(client, agent, tenant, amount=100000):
    return client.post(
        "/api/agent/payments",
        json={"tenantId": tenant.id, "amount": amount, "periodMonth": 3, "periodYear": 2026},
        headers=auth_headers(agent),
    )


class TestCalculation:

    def test_percentage(self):
        assert calculate_commission_amount(rule(CommissionType.PERCENTAGE, "5"), Decimal("100000")) == Decimal("5000.00")

    def test_minimum_applies(self):
        assert calculate_commission_amount(rule(CommissionType.PERCENTAGE, "5", min_amount="500"), 1000) == Decimal("500.00")

    def test_clamped_between_min_and_max(self):
        bounded = rule(CommissionType.PERCENTAGE, "10", min_amount="500", max_amount="5000")

        assert calculate_commission_amount(bounded, Decimal("100000")) == Decimal("5000.00")
        assert calculate_commission_amount(bounded, Decimal("1000")) == Decimal("500.00")

    def test_maximum_wins_over_minimum(self):
        priced = calculate_commission_amount(
            rule(CommissionType.PERCENTAGE, "5", min_amount="8000", max_amount="3000"), Decimal("100000")
        )
        assert priced == Decimal("3000.00")

    def test_fixed_ignores_amount(self):
        assert calculate_commission_amount(rule(CommissionType.FIXED, "2000"), Decimal("999999")) == Decimal("2000.00")

    def test_no_rule_is_zero(self):
        assert calculate_commission_amount(None, Decimal("100000")) == Decimal("0")


class TestAssistedPayments:

    def test_payment_earns_commission(self, client, db, agent, tenant, payment_rule):
        response = assisted_payment(client, agent, tenant)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["payment"]["amount"] == 100000
        assert data["commission"]["amount"] == 5000
        assert data["commission"]["status"] == "pending"
        assert data["transaction"]["actionType"] == "record_payment"
        assert db.query(Payment).count() == 1

    def test_no_rule_records_transaction_only(self, client, db, agent, tenant):
        response = assisted_payment(client, agent, tenant)

        assert response.status_code == 201
        assert response.json()["data"]["commission"] is None
        assert db.query(AgentTransaction).count() == 1
        assert db.query(AgentCommission).count() == 0

    def test_earnings(self, client, agent, tenant, payment_rule):
        assisted_payment(client, agent, tenant)

        response = client.get("/api/agent/earnings", headers=auth_headers(agent))

        earnings = response.json()["data"]
        assert earnings["totalEarned"] == 5000
        assert earnings["pendingAmount"] == 5000
        assert earnings["transactionCount"] == 1

    def test_owner_cannot_use_agent_portal(self, client, owner, tenant):
        assert assisted_payment(client, owner, tenant).status_code == 403


class TestRules:

    def test_admin_creates_rule(self, client, super_admin):
        response = client.post(
            "/api/commissions/rules",
            json={
                "actionType": "add_tenant",
                "name": "Tenant onboarding",
                "commissionType": "fixed",
                "commissionValue": 2000,
            },
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 201
        assert response.json()["data"]["commissionValue"] == 2000

    def test_percentage_over_hundred_rejected(self, client, super_admin):
        response = client.post(
            "/api/commissions/rules",
            json={
                "actionType": "record_payment",
                "name": "Too generous",
                "commissionType": "percentage",
                "commissionValue": 150,
            },
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 400

    def test_duplicate_action_type_conflicts(self, client, super_admin, payment_rule):
        response = client.post(
            "/api/commissions/rules",
            json={
                "actionType": "record_payment",
                "name": "Second rule",
                "commissionType": "fixed",
                "commissionValue": 100,
            },
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 409

    def test_racing_rule_creation_is_409(self, client, db, super_admin, payment_rule):
        with patch("services.commission_service._rule_for_action", return_value=None):
            response = client.post(
                "/api/commissions/rules",
                json={
                    "actionType": "record_payment",
                    "name": "Second rule",
                    "commissionType": "fixed",
                    "commissionValue": 100,
                },
                headers=auth_headers(super_admin),
            )

        assert response.status_code == 409
        assert db.query(CommissionRule).count() == 1

    def test_agent_cannot_manage_rules(self, client, agent):
        assert client.get("/api/commissions/rules", headers=auth_headers(agent)).status_code == 403


class TestPayouts:

    @pytest.fixture
    def commission_id(self, client, agent, tenant, payment_rule):
        return assisted_payment(client, agent, tenant).json()["data"]["commission"]["id"]

    def test_pay(self, client, super_admin, commission_id):
        response = client.post(f"/api/commissions/{commission_id}/pay", headers=auth_headers(super_admin))

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "paid"
        assert response.json()["data"]["paidBy"] == super_admin.id

    def test_paying_twice_fails(self, client, super_admin, commission_id):
        client.post(f"/api/commissions/{commission_id}/pay", headers=auth_headers(super_admin))

        response = client.post(f"/api/commissions/{commission_id}/pay", headers=auth_headers(super_admin))

        assert response.status_code == 400

    def test_cancelled_is_not_earned(self, client, db, agent, super_admin, commission_id):
        cancel = client.post(
            f"/api/commissions/{commission_id}/cancel",
            json={"reason": "Payment reversed"},
            headers=auth_headers(super_admin),
        )

        assert cancel.json()["data"]["status"] == "cancelled"
        assert db.get(AgentCommission, commission_id).status == CommissionStatus.CANCELLED
        earnings = client.get("/api/agent/earnings", headers=auth_headers(agent)).json()["data"]
        assert earnings["totalEarned"] == 0
        assert earnings["cancelledAmount"] == 5000

    def test_bulk_pay_skips_unknown(self, client, super_admin, commission_id):
        response = client.post(
            "/api/commissions/pay-bulk",
            json={"commissionIds": [commission_id, 999]},
            headers=auth_headers(super_admin),
        )

        result = response.json()["data"]
        assert result["paidCount"] == 1
        assert result["skippedIds"] == [999]
