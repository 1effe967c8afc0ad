# services/commission_service.py
"""
Commission Service - agent actions, commission rules and payouts.

When an agent performs an action for a client:
1. An AgentTransaction row records what was done
2. The active CommissionRule for the action type (if any) prices it
3. A pending AgentCommission is written when the priced amount is > 0

Steps 1-3 are flushed on the caller's session, so they commit or roll back
together with whatever the request did alongside them.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import AgentCommission, AgentTransaction, CommissionRule, User
from models.enums import AgentActionType, CommissionStatus, CommissionType, TargetUserType
from logging_config import logger
from .exceptions import BusinessRuleError, ConflictError, NotFoundError


ACTION_TYPE_LABELS = {
     AgentActionType.RECORD_PAYMENT: "Record Payment",
     AgentActionType.ADD_TENANT: "Add New Tenant",
     AgentActionType.ADD_PROPERTY: "Add New Property",
     AgentActionType.UPDATE_TENANT: "Update Tenant Info",
     AgentActionType.UPDATE_PROPERTY: "Update Property",
     AgentActionType.CREATE_MAINTENANCE: "Create Maintenance Request",
     AgentActionType.RESOLVE_MAINTENANCE: "Resolve Maintenance Issue",
     AgentActionType.ONBOARD_TENANT: "Onboard Tenant",
}

CENT = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class CommissionQuote:
     amount: Decimal
     rule_id: int


def action_label(action_type: str) -> str:
     try:
          return ACTION_TYPE_LABELS[AgentActionType(action_type)]
     except ValueError:
          return action_type


def _to_decimal(value) -> Optional[Decimal]:
     if value is None:
          return None
     return value if isinstance(value, Decimal) else Decimal(str(value))


# ---------------------------------------------------------------------------
# Rule engine
# ---------------------------------------------------------------------------

def get_commission_rule(db: Session, action_type: str) -> Optional[CommissionRule]:
     """The active rule for `action_type`, or None."""
     return (
          db.query(CommissionRule)
          .filter(
               CommissionRule.action_type == str(getattr(action_type, "value", action_type)),
               CommissionRule.is_active.is_(True),
          )
          .first()
     )


def calculate_commission_amount(rule: Optional[CommissionRule], transaction_amount=None) -> Decimal:
     """
     Price one action under `rule`.

     fixed      -> commission_value
     percentage -> transaction_amount * commission_value / 100 (no amount = 0)

     The result is raised to min_amount, *then* lowered to max_amount, so a
     rule with min > max always yields max. Rounded half-up to cents.
     """
     if rule is None:
          return ZERO

     value = _to_decimal(rule.commission_value) or ZERO
     if rule.commission_type == CommissionType.FIXED:
          commission = value
     else:
          amount = _to_decimal(transaction_amount) or ZERO
          commission = amount * value / Decimal("100")

     min_amount = _to_decimal(rule.min_amount)
     max_amount = _to_decimal(rule.max_amount)
     if min_amount is not None and commission < min_amount:
          commission = min_amount
     if max_amount is not None and commission > max_amount:
          commission = max_amount

     return commission.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_commission(db: Session, action_type: str, transaction_amount=None) -> Optional[CommissionQuote]:
     rule = get_commission_rule(db, action_type)
     if rule is None:
          return None
     return CommissionQuote(amount=calculate_commission_amount(rule, transaction_amount), rule_id=rule.id)


def record_agent_action(
     db: Session,
     agent_id: int,
     action_type: AgentActionType,
     target_user_type: TargetUserType,
     target_user_id: Optional[int] = None,
     target_tenant_id: Optional[int] = None,
     related_entity_type: Optional[str] = None,
     related_entity_id: Optional[int] = None,
     description: Optional[str] = None,
     metadata: Optional[Dict[str, Any]] = None,
     transaction_amount: Optional[Decimal] = None,
) -> Tuple[AgentTransaction, Optional[AgentCommission]]:
     """
     Record an agent action and, when a rule prices it above zero, its commission.

     Both rows are flushed, not committed: they share the caller's transaction.
     """
     transaction = AgentTransaction(
          agent_id=agent_id,
          action_type=AgentActionType(action_type).value,
          target_user_type=target_user_type,
          target_user_id=target_user_id,
          target_tenant_id=target_tenant_id,
          related_entity_type=related_entity_type,
          related_entity_id=related_entity_id,
          description=description,
          extra=metadata,
          transaction_amount=transaction_amount,
     )
     db.add(transaction)
     db.flush()

     commission = None
     quote = compute_commission(db, action_type, transaction_amount)
     if quote is not None and quote.amount > ZERO:
          commission = AgentCommission(
               agent_id=agent_id,
               transaction_id=transaction.id,
               commission_rule_id=quote.rule_id,
               amount=quote.amount,
               status=CommissionStatus.PENDING,
          )
          db.add(commission)
          db.flush()

     logger.info(
          "Agent %s recorded %s (transaction %s, commission %s)",
          agent_id, transaction.action_type, transaction.id, commission.amount if commission else "none",
     )
     return transaction, commission


# ---------------------------------------------------------------------------
# Agent-facing reads
# ---------------------------------------------------------------------------

def get_agent_earnings(
     db: Session,
     agent_id: int,
     start_date: Optional[datetime] = None,
     end_date: Optional[datetime] = None,
) -> Dict[str, Any]:
     query = db.query(AgentCommission).filter(AgentCommission.agent_id == agent_id)
     if start_date:
          query = query.filter(AgentCommission.created_at >= start_date)
     if end_date:
          query = query.filter(AgentCommission.created_at <= end_date)
     commissions = query.all()

     totals = {status: ZERO for status in CommissionStatus}
     month_start = datetime.utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
     this_month = ZERO
     for c in commissions:
          totals[CommissionStatus(c.status)] += c.amount
          if c.status != CommissionStatus.CANCELLED and c.created_at and c.created_at >= month_start:
               this_month += c.amount

     transaction_count = db.query(AgentTransaction).filter(AgentTransaction.agent_id == agent_id).count()
     return {
          "total_earned": totals[CommissionStatus.PENDING] + totals[CommissionStatus.PAID],
          "pending_amount": totals[CommissionStatus.PENDING],
          "paid_amount": totals[CommissionStatus.PAID],
          "cancelled_amount": totals[CommissionStatus.CANCELLED],
          "transaction_count": transaction_count,
          "commission_count": len(commissions),
          "this_month_earned": this_month,
     }


def agent_transactions_query(db: Session, agent_id: int, action_type: Optional[str] = None):
     query = (
          db.query(AgentTransaction)
          .filter(AgentTransaction.agent_id == agent_id)
          .order_by(desc(AgentTransaction.created_at), desc(AgentTransaction.id))
     )
     if action_type:
          query = query.filter(AgentTransaction.action_type == action_type)
     return query


def commissions_query(
     db: Session,
     agent_id: Optional[int] = None,
     status: Optional[CommissionStatus] = None,
):
     query = db.query(AgentCommission).order_by(desc(AgentCommission.created_at), desc(AgentCommission.id))
     if agent_id is not None:
          query = query.filter(AgentCommission.agent_id == agent_id)
     if status is not None:
          query = query.filter(AgentCommission.status == status)
     return query


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------

def _get_commission(db: Session, commission_id: int) -> AgentCommission:
     commission = db.query(AgentCommission).filter(AgentCommission.id == commission_id).first()
     if commission is None:
          raise NotFoundError.for_entity("Commission", commission_id)
     return commission


def mark_commission_paid(db: Session, commission_id: int, paid_by: int, notes: Optional[str] = None) -> AgentCommission:
     commission = _get_commission(db, commission_id)
     if commission.status == CommissionStatus.PAID:
          raise BusinessRuleError("Commission already paid")
     if commission.status == CommissionStatus.CANCELLED:
          raise BusinessRuleError("Cancelled commissions cannot be paid")

     commission.status = CommissionStatus.PAID
     commission.paid_at = datetime.utcnow()
     commission.paid_by = paid_by
     if notes:
          commission.notes = notes
     db.flush()
     logger.info("Commission %s marked paid by user %s", commission.id, paid_by)
     return commission


def bulk_mark_paid(db: Session, commission_ids: Iterable[int], paid_by: int, notes: Optional[str] = None) -> Dict[str, Any]:
     """Pay every pending commission among `commission_ids`; the rest are reported as skipped."""
     ids = list(dict.fromkeys(commission_ids))
     pending = (
          db.query(AgentCommission)
          .filter(AgentCommission.id.in_(ids), AgentCommission.status == CommissionStatus.PENDING)
          .all()
     )
     now = datetime.utcnow()
     total = ZERO
     for commission in pending:
          commission.status = CommissionStatus.PAID
          commission.paid_at = now
          commission.paid_by = paid_by
          if notes:
               commission.notes = notes
          total += commission.amount
     db.flush()

     paid_ids = {c.id for c in pending}
     logger.info("Bulk paid %d commissions (%s RWF) by user %s", len(pending), total, paid_by)
     return {
          "paid_count": len(pending),
          "total_amount": total,
          "skipped_ids": [i for i in ids if i not in paid_ids],
     }


def cancel_commission(db: Session, commission_id: int, reason: Optional[str] = None) -> AgentCommission:
     commission = _get_commission(db, commission_id)
     if commission.status != CommissionStatus.PENDING:
          raise BusinessRuleError("Only pending commissions can be cancelled")
     commission.status = CommissionStatus.CANCELLED
     if reason:
          commission.notes = reason
     db.flush()
     logger.info("Commission %s cancelled", commission.id)
     return commission


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def get_commission_reports(
     db: Session,
     start_date: Optional[datetime] = None,
     end_date: Optional[datetime] = None,
) -> Dict[str, Any]:
     query = db.query(AgentCommission, AgentTransaction.action_type, User).join(
          AgentTransaction, AgentCommission.transaction_id == AgentTransaction.id
     ).join(User, AgentCommission.agent_id == User.id)
     if start_date:
          query = query.filter(AgentCommission.created_at >= start_date)
     if end_date:
          query = query.filter(AgentCommission.created_at <= end_date)

     def _empty_row(key: str, label: str) -> Dict[str, Any]:
          return {
               "key": key,
               "label": label,
               "commission_count": 0,
               "total_amount": ZERO,
               "pending_amount": ZERO,
               "paid_amount": ZERO,
          }

     def _add(row: Dict[str, Any], commission: AgentCommission) -> None:
          row["commission_count"] += 1
          row["total_amount"] += commission.amount
          if commission.status == CommissionStatus.PENDING:
               row["pending_amount"] += commission.amount
          elif commission.status == CommissionStatus.PAID:
               row["paid_amount"] += commission.amount

     by_agent: Dict[int, Dict[str, Any]] = {}
     by_action: Dict[str, Dict[str, Any]] = {}
     totals = _empty_row("all", "All")
     for commission, action_type, agent in query.all():
          agent_row = by_agent.setdefault(agent.id, _empty_row(str(agent.id), agent.full_name))
          action_row = by_action.setdefault(action_type, _empty_row(action_type, action_label(action_type)))
          for row in (agent_row, action_row, totals):
               _add(row, commission)

     return {
          "by_agent": sorted(by_agent.values(), key=lambda r: r["total_amount"], reverse=True),
          "by_action_type": sorted(by_action.values(), key=lambda r: r["total_amount"], reverse=True),
          "total_amount": totals["total_amount"],
          "pending_amount": totals["pending_amount"],
          "paid_amount": totals["paid_amount"],
     }


# ---------------------------------------------------------------------------
# Rule administration
# ---------------------------------------------------------------------------

def list_rules(db: Session) -> List[CommissionRule]:
     return db.query(CommissionRule).order_by(CommissionRule.action_type).all()


def get_rule(db: Session, rule_id: int) -> CommissionRule:
     rule = db.query(CommissionRule).filter(CommissionRule.id == rule_id).first()
     if rule is None:
          raise NotFoundError.for_entity("Commission rule", rule_id)
     return rule


def _rule_for_action(db: Session, action_type: str) -> Optional[CommissionRule]:
     return db.query(CommissionRule).filter(CommissionRule.action_type == action_type).first()


def create_rule(db: Session, data: Dict[str, Any], created_by: int) -> CommissionRule:
     action_type = AgentActionType(data["action_type"]).value
     if _rule_for_action(db, action_type) is not None:
          raise ConflictError(f"A commission rule for '{action_type}' already exists")
     rule = CommissionRule(**{**data, "action_type": action_type}, created_by=created_by)
     db.add(rule)
     try:
          db.flush()
     except IntegrityError:
          db.rollback()
          raise ConflictError(f"A commission rule for '{action_type}' already exists")
     logger.info("Commission rule %s created for %s", rule.id, action_type)
     return rule


def update_rule(db: Session, rule_id: int, changes: Dict[str, Any]) -> CommissionRule:
     rule = get_rule(db, rule_id)
     for key, value in changes.items():
          setattr(rule, key, value)
     if rule.commission_type == CommissionType.PERCENTAGE and _to_decimal(rule.commission_value) > Decimal("100"):
          raise BusinessRuleError("Percentage commission value cannot exceed 100")
     db.flush()
     return rule


def delete_rule(db: Session, rule_id: int) -> bool:
     """
     Delete a rule, or deactivate it when commissions already reference it.

     Returns True when the row was actually deleted.
     """
     rule = get_rule(db, rule_id)
     in_use = db.query(AgentCommission).filter(AgentCommission.commission_rule_id == rule.id).count()
     if in_use:
          rule.is_active = False
          db.flush()
          logger.info("Commission rule %s deactivated (%d commissions reference it)", rule.id, in_use)
          return False
     db.delete(rule)
     db.flush()
     logger.info("Commission rule %s deleted", rule_id)
     return True
