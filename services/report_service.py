# services/report_service.py
"""
Report Service - dashboard figures and landlord reports.

Every number here is computed from the scoped query builders, so a manager's
totals only cover the properties they were granted, and payment, tenant or
maintenance figures only where the matching view capability is set.
"""
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models import MaintenanceTicket, Payment, Property, Tenant, Unit
from models.enums import TenantStatus, TicketStatus, UnitStatus
from .access_service import AccessScope
from .exceptions import BusinessRuleError
from .permissions import Capability
from .scoping import payment_query, property_query, tenant_query, ticket_query, unit_query

ZERO = Decimal("0")
CENT = Decimal("0.01")
RECENT_LIMIT = 5
OPEN_TICKET_STATUSES = (TicketStatus.PENDING, TicketStatus.IN_PROGRESS)


def _money(value) -> Decimal:
     return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def _rate(part: int, whole: int) -> int:
     """Whole-number percentage, 0 when there is nothing to divide by."""
     if not whole:
          return 0
     return int((Decimal(part) * 100 / Decimal(whole)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _sum_amount(query) -> Decimal:
     return _money(query.with_entities(func.coalesce(func.sum(Payment.amount), 0)).scalar())


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def dashboard_stats(db: Session, scope: AccessScope, today: Optional[date] = None) -> Dict[str, Any]:
     """
     Headline numbers for the landing dashboard.

     `total_revenue` is what was paid for the current rent period. The recent
     lists hold ORM rows for the router to serialize.
     """
     today = today or date.today()

     units = unit_query(db, scope)
     total_units = units.count()
     occupied_units = units.filter(Unit.status == UnitStatus.OCCUPIED).count()

     tenants = tenant_query(db, scope, Capability.VIEW_TENANTS)
     payments = payment_query(db, scope, Capability.VIEW_PAYMENTS)
     tickets = ticket_query(db, scope, Capability.VIEW_MAINTENANCE)

     this_period = payments.filter(Payment.period_month == today.month, Payment.period_year == today.year)

     return {
          "overview": {
               "total_properties": property_query(db, scope).count(),
               "total_units": total_units,
               "occupied_units": occupied_units,
               "vacant_units": units.filter(Unit.status == UnitStatus.VACANT).count(),
               "occupancy_rate": _rate(occupied_units, total_units),
               "total_tenants": tenants.filter(Tenant.status != TenantStatus.EXITED).count(),
               "active_tenants": tenants.filter(Tenant.status == TenantStatus.ACTIVE).count(),
               "late_tenants": tenants.filter(Tenant.status == TenantStatus.LATE).count(),
               "total_revenue": _sum_amount(this_period),
               "pending_maintenance": tickets.filter(MaintenanceTicket.status.in_(OPEN_TICKET_STATUSES)).count(),
          },
          "recent_payments": (
               payments.order_by(Payment.created_at.desc(), Payment.id.desc()).limit(RECENT_LIMIT).all()
          ),
          "recent_maintenance": (
               tickets.order_by(MaintenanceTicket.created_at.desc(), MaintenanceTicket.id.desc())
               .limit(RECENT_LIMIT)
               .all()
          ),
          "current_period": {"month": today.month, "year": today.year},
     }


# ---------------------------------------------------------------------------
# Revenue
# ---------------------------------------------------------------------------

def default_revenue_window(today: date):
     """The twelve months up to `today`, starting on the first of a month."""
     return date(today.year - 1, today.month, 1), today


def revenue_report(
     db: Session,
     scope: AccessScope,
     start_date: Optional[date] = None,
     end_date: Optional[date] = None,
     property_id: Optional[int] = None,
     today: Optional[date] = None,
) -> Dict[str, Any]:
     """
     Money received between two payment dates, bucketed by calendar month.

     Grouping happens here rather than in SQL so the same code runs on
     SQL Server and SQLite.
     """
     default_start, default_end = default_revenue_window(today or date.today())
     end_date = end_date or default_end
     start_date = start_date or default_start
     if start_date > end_date:
          raise BusinessRuleError("startDate must be on or before endDate")

     query = payment_query(db, scope, Capability.VIEW_PAYMENTS).filter(
          Payment.payment_date >= start_date,
          Payment.payment_date <= end_date,
     )
     if property_id is not None:
          query = query.filter(Payment.unit_id.in_(select(Unit.id).where(Unit.property_id == property_id)))
     rows = query.with_entities(Payment.payment_date, Payment.payment_method, Payment.amount).all()

     periods: Dict[str, Dict[str, Any]] = {}
     for paid_on, method, amount in sorted(rows, key=lambda row: row[0]):
          key = paid_on.strftime("%Y-%m")
          if key not in periods:
               periods[key] = {"period": key, "total": ZERO, "count": 0, "by_method": defaultdict(lambda: ZERO)}
          bucket = periods[key]
          bucket["total"] += _money(amount)
          bucket["count"] += 1
          bucket["by_method"][getattr(method, "value", method)] += _money(amount)

     total = sum((bucket["total"] for bucket in periods.values()), ZERO)
     count = len(rows)
     return {
          "total_revenue": total,
          "payment_count": count,
          "average_payment": _money(total / count) if count else ZERO,
          "period_data": [{**bucket, "by_method": dict(bucket["by_method"])} for bucket in periods.values()],
          "start_date": start_date,
          "end_date": end_date,
     }


# ---------------------------------------------------------------------------
# Occupancy
# ---------------------------------------------------------------------------

def occupancy_report(db: Session, scope: AccessScope) -> Dict[str, Any]:
     """Unit status counts and rent at stake per property, plus portfolio totals."""
     properties: List[Property] = property_query(db, scope).order_by(Property.name, Property.id).all()
     units_by_property: Dict[int, List[Unit]] = defaultdict(list)
     for unit in unit_query(db, scope).all():
          units_by_property[unit.property_id].append(unit)

     rows = []
     for prop in properties:
          units = units_by_property.get(prop.id, [])
          counts = {status: sum(1 for u in units if u.status == status) for status in UnitStatus}
          potential = sum((_money(u.monthly_rent) for u in units), ZERO)
          actual = sum((_money(u.monthly_rent) for u in units if u.status == UnitStatus.OCCUPIED), ZERO)
          rows.append({
               "id": prop.id,
               "name": prop.name,
               "address": prop.address,
               "type": prop.type,
               "units": {
                    "total": len(units),
                    "occupied": counts[UnitStatus.OCCUPIED],
                    "vacant": counts[UnitStatus.VACANT],
                    "maintenance": counts[UnitStatus.MAINTENANCE],
                    "occupancy_rate": _rate(counts[UnitStatus.OCCUPIED], len(units)),
               },
               "revenue": {"potential": potential, "actual": actual, "loss": potential - actual},
          })

     total_units = sum(row["units"]["total"] for row in rows)
     occupied_units = sum(row["units"]["occupied"] for row in rows)
     potential_revenue = sum((row["revenue"]["potential"] for row in rows), ZERO)
     actual_revenue = sum((row["revenue"]["actual"] for row in rows), ZERO)
     return {
          "properties": rows,
          "totals": {
               "total_units": total_units,
               "occupied_units": occupied_units,
               "vacant_units": sum(row["units"]["vacant"] for row in rows),
               "overall_occupancy_rate": _rate(occupied_units, total_units),
               "potential_revenue": potential_revenue,
               "actual_revenue": actual_revenue,
               "revenue_loss": potential_revenue - actual_revenue,
          },
     }
