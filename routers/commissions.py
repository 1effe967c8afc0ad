# routers/commissions.py
"""
Commission administration: rules, reports and payouts.

Open to super admins and to users granted the `manage_commissions`
permission.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import AgentCommission, CommissionRule
from models.enums import AgentActionType, AuditEntityType, CommissionStatus
from schemas.commission import (
     ActionTypeResponse,
     AgentCommissionResponse,
     BulkPayResult,
     CommissionBulkPayRequest,
     CommissionCancelRequest,
     CommissionPayRequest,
     CommissionReport,
     CommissionRuleCreate,
     CommissionRuleResponse,
     CommissionRuleUpdate,
)
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from services import audit_service, commission_service
from services.access_service import AccessScope
from services.policy import Action, Resource
from services.scoping import paginate, require_role

router = APIRouter(prefix="/api/commissions", tags=["commissions"])


def build_commission_response(commission: AgentCommission) -> AgentCommissionResponse:
     response = AgentCommissionResponse.model_validate(commission)
     if commission.agent is not None:
          response.agent_name = commission.agent.full_name
     if commission.transaction is not None:
          response.action_type = commission.transaction.action_type
          response.transaction_description = commission.transaction.description
     return response


def _build_rule_response(rule: CommissionRule) -> CommissionRuleResponse:
     return CommissionRuleResponse.model_validate(rule)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

@router.get(
     "/rules",
     response_model=ApiResponse[List[CommissionRuleResponse]],
     summary="List commission rules"
)
def list_rules(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.COMMISSION_RULE, Action.READ)
     return ApiResponse[List[CommissionRuleResponse]](
          data=[_build_rule_response(r) for r in commission_service.list_rules(db)]
     )


@router.get(
     "/rules/{rule_id}",
     response_model=ApiResponse[CommissionRuleResponse],
     summary="Get a commission rule"
)
def get_rule(rule_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.COMMISSION_RULE, Action.READ)
     return ApiResponse[CommissionRuleResponse](data=_build_rule_response(commission_service.get_rule(db, rule_id)))


@router.post(
     "/rules",
     response_model=ApiResponse[CommissionRuleResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Create a commission rule"
)
def create_rule(body: CommissionRuleCreate, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     """
     One rule per action type.

     - **percentage**: commissionValue is 0-100, applied to the transaction amount
     - **fixed**: commissionValue is a flat RWF amount
     - **minAmount** / **maxAmount**: clamp the result, min first
     """
     require_role(scope, Resource.COMMISSION_RULE, Action.CREATE)
     rule = commission_service.create_rule(db, body.model_dump(), created_by=scope.user_id)
     db.commit()
     return ApiResponse[CommissionRuleResponse](data=_build_rule_response(rule), message="Commission rule created")


@router.put(
     "/rules/{rule_id}",
     response_model=ApiResponse[CommissionRuleResponse],
     summary="Update a commission rule"
)
def update_rule(
     rule_id: int,
     body: CommissionRuleUpdate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.COMMISSION_RULE, Action.UPDATE)
     rule = commission_service.update_rule(db, rule_id, body.model_dump(exclude_unset=True))
     db.commit()
     return ApiResponse[CommissionRuleResponse](data=_build_rule_response(rule), message="Commission rule updated")


@router.delete(
     "/rules/{rule_id}",
     response_model=MessageResponse,
     summary="Delete a commission rule"
)
def delete_rule(rule_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     """Rules already referenced by commissions are deactivated instead of deleted."""
     require_role(scope, Resource.COMMISSION_RULE, Action.DELETE)
     deleted = commission_service.delete_rule(db, rule_id)
     db.commit()
     if deleted:
          return MessageResponse(message="Commission rule deleted")
     return MessageResponse(message="Commission rule is in use and was deactivated")


@router.get(
     "/action-types",
     response_model=ApiResponse[List[ActionTypeResponse]],
     summary="List agent action types with their rules"
)
def list_action_types(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.COMMISSION_RULE, Action.READ)
     rules = {r.action_type: r for r in commission_service.list_rules(db)}
     data = []
     for action_type in AgentActionType:
          rule = rules.get(action_type.value)
          data.append(
               ActionTypeResponse(
                    value=action_type.value,
                    label=commission_service.action_label(action_type.value),
                    rule=_build_rule_response(rule) if rule is not None else None,
               )
          )
     return ApiResponse[List[ActionTypeResponse]](data=data)


# ---------------------------------------------------------------------------
# Commissions
# ---------------------------------------------------------------------------

@router.get(
     "/reports",
     response_model=ApiResponse[CommissionReport],
     summary="Commission totals by agent and by action type"
)
def get_reports(
     start_date: Optional[datetime] = Query(None, alias="startDate", description="Created on or after"),
     end_date: Optional[datetime] = Query(None, alias="endDate", description="Created on or before"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.COMMISSION, Action.READ)
     report = commission_service.get_commission_reports(db, start_date, end_date)
     return ApiResponse[CommissionReport](data=CommissionReport.model_validate(report))


@router.get(
     "",
     response_model=PaginatedResponse[AgentCommissionResponse],
     summary="List commissions"
)
def list_commissions(
     agent_id: Optional[int] = Query(None, alias="agentId", description="Filter by agent"),
     status: Optional[CommissionStatus] = Query(None, description="pending, paid or cancelled"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.COMMISSION, Action.READ)
     query = commission_service.commissions_query(db, agent_id=agent_id, status=status)
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[AgentCommissionResponse](
          data=[build_commission_response(c) for c in items],
          pagination=pagination,
     )


@router.post(
     "/pay-bulk",
     response_model=ApiResponse[BulkPayResult],
     summary="Mark several commissions as paid"
)
def pay_bulk(body: CommissionBulkPayRequest, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.COMMISSION, Action.UPDATE)
     result = commission_service.bulk_mark_paid(db, body.commission_ids, paid_by=scope.user_id, notes=body.notes)
     audit_service.record(db, scope.user_id, "commission.pay_bulk", AuditEntityType.SYSTEM,
                          metadata={"paid_count": result["paid_count"], "total_amount": str(result["total_amount"])})
     db.commit()
     return ApiResponse[BulkPayResult](
          data=BulkPayResult.model_validate(result),
          message=f"{result['paid_count']} commission(s) marked as paid",
     )


@router.post(
     "/{commission_id}/pay",
     response_model=ApiResponse[AgentCommissionResponse],
     summary="Mark a commission as paid"
)
def pay_commission(
     commission_id: int,
     body: Optional[CommissionPayRequest] = None,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.COMMISSION, Action.UPDATE)
     notes = body.notes if body else None
     commission = commission_service.mark_commission_paid(db, commission_id, paid_by=scope.user_id, notes=notes)
     audit_service.record(db, scope.user_id, "commission.pay", AuditEntityType.SYSTEM, commission.id,
                          metadata={"amount": str(commission.amount), "agent_id": commission.agent_id})
     db.commit()
     return ApiResponse[AgentCommissionResponse](data=build_commission_response(commission), message="Commission paid")


@router.post(
     "/{commission_id}/cancel",
     response_model=ApiResponse[AgentCommissionResponse],
     summary="Cancel a pending commission"
)
def cancel_commission(
     commission_id: int,
     body: Optional[CommissionCancelRequest] = None,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.COMMISSION, Action.UPDATE)
     reason = body.reason if body else None
     commission = commission_service.cancel_commission(db, commission_id, reason=reason)
     audit_service.record(db, scope.user_id, "commission.cancel", AuditEntityType.SYSTEM, commission.id, reason)
     db.commit()
     return ApiResponse[AgentCommissionResponse](
          data=build_commission_response(commission), message="Commission cancelled"
     )
