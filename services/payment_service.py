# services/payment_service.py
"""
Payment Service - rent payments and tenant balances.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_CEILING
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Payment, Property, Tenant, Unit
from models.enums import AuditEntityType, NotificationType, PaymentMethod, TenantStatus
from logging_config import logger
from . import audit_service, notification_service
from .access_service import AccessScope
from .exceptions import BusinessRuleError
from .policy import Action, Resource
from .scoping import get_or_404, payment_query, require_capability
from .tenant_service import TenantService


@dataclass
class Balance:
     tenant_id: int
     monthly_rent: Decimal
     months_elapsed: int
     expected_total: Decimal
     total_paid: Decimal
     balance: Decimal
     months_owed: int


def months_elapsed(lease_start: Optional[date], today: date) -> int:
     """Rent months from the lease start month through `today`'s month, inclusive."""
     start = lease_start or today
     months = (today.year - start.year) * 12 + (today.month - start.month) + 1
     return max(months, 0)


def compute_balance(
     tenant_id: int,
     monthly_rent: Decimal,
     lease_start: Optional[date],
     total_paid: Decimal,
     today: Optional[date] = None,
) -> Balance:
     elapsed = months_elapsed(lease_start, today or date.today())
     expected = monthly_rent * elapsed
     balance = expected - total_paid
     if balance > 0 and monthly_rent > 0:
          owed = int((balance / monthly_rent).to_integral_value(rounding=ROUND_CEILING))
     else:
          owed = 0
     return Balance(
          tenant_id=tenant_id,
          monthly_rent=monthly_rent,
          months_elapsed=elapsed,
          expected_total=expected,
          total_paid=total_paid,
          balance=balance,
          months_owed=owed,
     )


class PaymentService:
     """Service class for payment-related business logic."""

     @staticmethod
     def search(
          db: Session,
          scope: AccessScope,
          capability=None,
          tenant_id: Optional[int] = None,
          property_id: Optional[int] = None,
          period_month: Optional[int] = None,
          period_year: Optional[int] = None,
          payment_method: Optional[PaymentMethod] = None,
     ):
          query = payment_query(db, scope, capability)
          if tenant_id is not None:
               query = query.filter(Payment.tenant_id == tenant_id)
          if property_id is not None:
               query = query.filter(Payment.unit_id.in_(db.query(Unit.id).filter(Unit.property_id == property_id)))
          if period_month is not None:
               query = query.filter(Payment.period_month == period_month)
          if period_year is not None:
               query = query.filter(Payment.period_year == period_year)
          if payment_method is not None:
               query = query.filter(Payment.payment_method == payment_method)
          return query.order_by(Payment.payment_date.desc(), Payment.id.desc())

     @staticmethod
     def get(db: Session, scope: AccessScope, payment_id: int, action: Action = Action.READ) -> Payment:
          payment = get_or_404(payment_query(db, scope), Payment, payment_id, "Payment")
          require_capability(scope, payment.unit.property_id, Resource.PAYMENT, action)
          return payment

     @staticmethod
     def record(
          db: Session,
          tenant: Tenant,
          data: dict,
          recorded_by: int,
          agent_id: Optional[int] = None,
     ) -> Payment:
          """
          Persist a payment for an already authorized tenant.

          The payment is booked against the tenant's current unit; a late
          tenant becomes active again.
          """
          if tenant.unit is None:
               raise BusinessRuleError("Tenant is not assigned to a unit")
          month = data["period_month"]
          if not 1 <= month <= 12:
               raise BusinessRuleError("periodMonth must be between 1 and 12")

          payment = Payment(
               tenant_id=tenant.id,
               unit_id=tenant.unit_id,
               amount=data["amount"],
               payment_method=data.get("payment_method") or PaymentMethod.CASH,
               payment_date=data.get("payment_date") or date.today(),
               period_month=month,
               period_year=data["period_year"],
               notes=data.get("notes"),
               received_by=recorded_by,
               performed_by_agent_id=agent_id,
          )
          db.add(payment)
          if tenant.status == TenantStatus.LATE:
               tenant.status = TenantStatus.ACTIVE
          db.flush()

          audit_service.record(
               db, recorded_by, "payment.record", AuditEntityType.PAYMENT, payment.id,
               f"Recorded {payment.amount} RWF from {tenant.full_name}",
               metadata={"tenant_id": tenant.id, "period": f"{payment.period_year}-{payment.period_month:02d}"},
          )
          recipients = notification_service.property_stakeholders(db, tenant.unit.property_id, exclude=recorded_by)
          recipients.append(tenant.user_account_id)
          notification_service.notify_many(
               db,
               recipients,
               type=NotificationType.PAYMENT_RECEIVED,
               title="Payment received",
               message=(
                    f"{payment.amount} RWF received from {tenant.full_name} for "
                    f"{payment.period_year}-{payment.period_month:02d}"
               ),
               entity_type=AuditEntityType.PAYMENT,
               entity_id=payment.id,
          )
          logger.info("Payment %s recorded for tenant %s by user %s", payment.id, tenant.id, recorded_by)
          return payment

     @staticmethod
     def create(db: Session, scope: AccessScope, data: dict) -> Payment:
          tenant = get_or_404(
               TenantService.search(db, scope), Tenant, data["tenant_id"], "Tenant"
          )
          if tenant.unit is None:
               raise BusinessRuleError("Tenant is not assigned to a unit")
          require_capability(scope, tenant.unit.property_id, Resource.PAYMENT, Action.CREATE)
          return PaymentService.record(db, tenant, data, recorded_by=scope.user_id)

     @staticmethod
     def delete(db: Session, scope: AccessScope, payment_id: int) -> None:
          payment = PaymentService.get(db, scope, payment_id, Action.DELETE)
          audit_service.record(db, scope.user_id, "payment.delete", AuditEntityType.PAYMENT, payment.id,
                               metadata={"amount": str(payment.amount), "tenant_id": payment.tenant_id})
          db.delete(payment)
          db.flush()

     @staticmethod
     def balance(db: Session, scope: AccessScope, tenant_id: int, today: Optional[date] = None) -> Balance:
          tenant = TenantService.get(db, scope, tenant_id)
          if tenant.unit is not None:
               require_capability(scope, tenant.unit.property_id, Resource.PAYMENT, Action.READ)
          if tenant.unit is None:
               return Balance(tenant.id, Decimal("0"), 0, Decimal("0"), Decimal("0"), Decimal("0"), 0)
          paid = db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(Payment.tenant_id == tenant.id).scalar()
          return compute_balance(
               tenant.id,
               Decimal(str(tenant.unit.monthly_rent)),
               tenant.lease_start_date,
               Decimal(str(paid)),
               today,
          )

     @staticmethod
     def property_of(payment: Payment) -> Optional[Property]:
          """The payment's property, soft deleted or not."""
          return payment.unit.property if payment.unit is not None else None
