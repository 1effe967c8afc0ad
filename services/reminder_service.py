# services/reminder_service.py
"""
Rent reminders sent to a tenant by email.

Every attempt is kept as a ReminderLog row, including the ones Brevo refused,
so the landlord can see what the tenant was (or was not) told.
"""
from calendar import monthrange
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from models import ReminderLog, Tenant
from models.enums import (
     AuditEntityType,
     NotificationType,
     ReminderChannel,
     ReminderStatus,
     ReminderTrigger,
)
from utils.email import send_payment_reminder as email_payment_reminder
from logging_config import logger
from . import audit_service, notification_service
from .access_service import AccessScope
from .exceptions import BusinessRuleError
from .permissions import Capability
from .scoping import get_or_404, tenant_query


def _on_day(year: int, month: int, day: int) -> date:
     return date(year, month, min(day, monthrange(year, month)[1]))


def next_due_date(rent_due_day: int, today: Optional[date] = None) -> date:
     """This month's due date, or next month's once this month's has passed."""
     today = today or date.today()
     due = _on_day(today.year, today.month, rent_due_day)
     if due >= today:
          return due
     if today.month == 12:
          return _on_day(today.year + 1, 1, rent_due_day)
     return _on_day(today.year, today.month + 1, rent_due_day)


def trigger_for(due: date, today: date) -> ReminderTrigger:
     if due > today:
          return ReminderTrigger.BEFORE_DUE
     if due == today:
          return ReminderTrigger.ON_DUE
     return ReminderTrigger.AFTER_DUE


def default_message(tenant: Tenant, due: date) -> str:
     amount = tenant.unit.monthly_rent if tenant.unit is not None else None
     rent = f"{amount:,.0f} RWF" if amount is not None else "Your rent"
     where = f" for unit {tenant.unit.unit_number}" if tenant.unit is not None else ""
     return f"{rent}{where} is due on {due.strftime('%d %B %Y')}. Please pay on time."


def send_payment_reminder(
     db: Session,
     scope: AccessScope,
     tenant_id: int,
     message: Optional[str] = None,
     today: Optional[date] = None,
) -> ReminderLog:
     tenant = get_or_404(tenant_query(db, scope, Capability.VIEW_TENANTS), Tenant, tenant_id, "Tenant")
     if not tenant.email:
          raise BusinessRuleError("Tenant has no email address")

     today = today or date.today()
     due = next_due_date(tenant.rent_due_day or 1, today)
     text = message or default_message(tenant, due)

     sent = email_payment_reminder(tenant.email, tenant.full_name, text)
     log = ReminderLog(
          tenant_id=tenant.id,
          type=ReminderChannel.EMAIL,
          trigger_type=trigger_for(due, today),
          status=ReminderStatus.SENT if sent else ReminderStatus.FAILED,
          message=text,
     )
     db.add(log)
     db.flush()

     notification_service.notify(
          db, tenant.user_account_id, NotificationType.PAYMENT_REMINDER, "Rent reminder", text,
          entity_type=AuditEntityType.TENANT, entity_id=tenant.id,
     )
     audit_service.record(db, scope.user_id, "tenant.payment_reminder", AuditEntityType.TENANT, tenant.id,
                          metadata={"status": ReminderStatus(log.status).value, "due_date": due.isoformat()})
     if not sent:
          logger.warning("Payment reminder to tenant %s could not be delivered", tenant.id)
     return log
