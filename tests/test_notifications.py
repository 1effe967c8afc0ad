# tests/test_notifications.py

"""
Tests for in-app notifications and tenant payment reminders.
"""

from datetime import date
from unittest.mock import patch

import pytest

from conftest import auth_headers
from models import Notification, ReminderLog
from models.enums import NotificationType, ReminderTrigger
from services import notification_service
from services.reminder_service import next_due_date, trigger_for


@pytest.fixture
def notifications(db, tenant_user):
    created = [
        notification_service.notify(db, tenant_user.id, NotificationType.SYSTEM, f"Notice {i}", "Hello")
        for i in range(3)
    ]
    db.commit()
    return created


class TestNotifications:

    def test_list_and_unread_count(self, client, tenant_user, notifications):
        headers = auth_headers(tenant_user)

        listing = client.get("/api/notifications", headers=headers)
        count = client.get("/api/notifications/unread-count", headers=headers)

        assert listing.json()["pagination"]["total"] == 3
        assert count.json()["data"]["count"] == 3

    def test_only_recipient_can_mark_read(self, client, owner, tenant_user, notifications):
        target = notifications[0].id

        foreign = client.patch(f"/api/notifications/{target}/read", headers=auth_headers(owner))
        own = client.patch(f"/api/notifications/{target}/read", headers=auth_headers(tenant_user))

        assert foreign.status_code == 404
        assert own.status_code == 200
        assert own.json()["data"]["isRead"] is True
        assert own.json()["data"]["readAt"] is not None

    def test_only_recipient_can_delete(self, client, db, owner, tenant_user, notifications):
        target = notifications[0].id

        foreign = client.delete(f"/api/notifications/{target}", headers=auth_headers(owner))
        own = client.delete(f"/api/notifications/{target}", headers=auth_headers(tenant_user))

        assert foreign.status_code == 404
        assert own.status_code == 200
        assert db.query(Notification).count() == 2

    def test_read_all(self, client, tenant_user, notifications):
        headers = auth_headers(tenant_user)

        response = client.patch("/api/notifications/read-all", headers=headers)

        assert response.json()["data"]["updated"] == 3
        unread = client.get("/api/notifications?unreadOnly=true", headers=headers)
        assert unread.json()["data"] == []


class TestDueDates:

    def test_due_day_clamped_to_month_end(self):
        assert next_due_date(31, date(2026, 2, 10)) == date(2026, 2, 28)

    def test_passed_due_day_rolls_to_next_month(self):
        assert next_due_date(5, date(2026, 3, 10)) == date(2026, 4, 5)

    def test_december_rolls_into_january(self):
        assert next_due_date(1, date(2026, 12, 2)) == date(2027, 1, 1)

    def test_trigger(self):
        today = date(2026, 3, 10)
        assert trigger_for(date(2026, 3, 15), today) == ReminderTrigger.BEFORE_DUE
        assert trigger_for(today, today) == ReminderTrigger.ON_DUE
        assert trigger_for(date(2026, 3, 1), today) == ReminderTrigger.AFTER_DUE


class TestPaymentReminders:

    def test_reminder_is_logged_and_notified(self, client, db, owner, tenant_user, tenant):
        with patch("services.reminder_service.email_payment_reminder", return_value=True) as send:
            response = client.post(
                f"/api/notifications/tenant/{tenant.id}/payment-reminder", headers=auth_headers(owner)
            )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "sent"
        send.assert_called_once()
        assert send.call_args[0][0] == tenant.email
        assert db.query(ReminderLog).count() == 1
        reminders = db.query(Notification).filter(
            Notification.user_id == tenant_user.id,
            Notification.type == NotificationType.PAYMENT_REMINDER,
        )
        assert reminders.count() == 1

    def test_failed_delivery_is_still_logged(self, client, db, owner, tenant):
        with patch("services.reminder_service.email_payment_reminder", return_value=False):
            response = client.post(
                f"/api/notifications/tenant/{tenant.id}/payment-reminder",
                json={"message": "Please pay March rent"},
                headers=auth_headers(owner),
            )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "failed"
        assert data["message"] == "Please pay March rent"
        assert db.query(ReminderLog).count() == 1

    def test_tenant_cannot_send_reminders(self, client, tenant_user, tenant):
        response = client.post(
            f"/api/notifications/tenant/{tenant.id}/payment-reminder", headers=auth_headers(tenant_user)
        )

        assert response.status_code == 403
