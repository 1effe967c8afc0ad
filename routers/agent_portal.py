# routers/agent_portal.py
"""
Agent portal: the actions an agent performs for clients, and what they earn.

Every assisted action writes the domain row, its AgentTransaction and (when a
rule prices it) its AgentCommission in one database transaction.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import AgentCommission, AgentTransaction, Tenant
from models.enums import AgentActionType, CommissionStatus, TargetUserType
from schemas.agent import (
     AssistedPaymentRequest,
     AssistedPaymentResponse,
     AssistedPropertyRequest,
     AssistedPropertyResponse,
)
from schemas.commission import (
     AgentCommissionResponse,
     AgentDashboard,
     AgentEarnings,
     AgentTransactionResponse,
     RecordActionRequest,
     RecordActionResponse,
)
from schemas.common import ApiResponse, PaginatedResponse
from services import commission_service, property_service
from services.access_service import AccessScope
from services.exceptions import NotFoundError
from services.payment_service import PaymentService
from services.policy import Action, Resource
from services.scoping import paginate, require_role
from .commissions import build_commission_response
from .payments import build_payment_response
from .properties import build_property_response

router = APIRouter(prefix="/api/agent", tags=["agent portal"])


def _build_transaction_response(transaction: AgentTransaction) -> AgentTransactionResponse:
     response = AgentTransactionResponse.model_validate(transaction)
     if transaction.commission is not None:
          response.commission_amount = transaction.commission.amount
          response.commission_status = transaction.commission.status
     return response


def _commission_or_none(commission: Optional[AgentCommission]) -> Optional[AgentCommissionResponse]:
     return build_commission_response(commission) if commission is not None else None


@router.get(
     "/dashboard",
     response_model=ApiResponse[AgentDashboard],
     summary="Earnings summary and latest transactions"
)
def dashboard(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.AGENT_PORTAL, Action.READ)
     earnings = commission_service.get_agent_earnings(db, scope.user_id)
     recent = commission_service.agent_transactions_query(db, scope.user_id).limit(10).all()
     return ApiResponse[AgentDashboard](
          data=AgentDashboard(
               earnings=AgentEarnings.model_validate(earnings),
               recent_transactions=[_build_transaction_response(t) for t in recent],
          )
     )


@router.get(
     "/earnings",
     response_model=ApiResponse[AgentEarnings],
     summary="Commission totals for a date range"
)
def earnings(
     start_date: Optional[datetime] = Query(None, alias="startDate", description="Created on or after"),
     end_date: Optional[datetime] = Query(None, alias="endDate", description="Created on or before"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.AGENT_PORTAL, Action.READ)
     totals = commission_service.get_agent_earnings(db, scope.user_id, start_date, end_date)
     return ApiResponse[AgentEarnings](data=AgentEarnings.model_validate(totals))


@router.get(
     "/transactions",
     response_model=PaginatedResponse[AgentTransactionResponse],
     summary="List my transactions"
)
def list_transactions(
     action_type: Optional[AgentActionType] = Query(None, alias="actionType", description="Filter by action"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.AGENT_PORTAL, Action.READ)
     query = commission_service.agent_transactions_query(
          db, scope.user_id, action_type.value if action_type else None
     )
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[AgentTransactionResponse](
          data=[_build_transaction_response(t) for t in items],
          pagination=pagination,
     )


@router.get(
     "/commissions",
     response_model=PaginatedResponse[AgentCommissionResponse],
     summary="List my commissions"
)
def list_my_commissions(
     status: Optional[CommissionStatus] = Query(None, description="pending, paid or cancelled"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.AGENT_PORTAL, Action.READ)
     query = commission_service.commissions_query(db, agent_id=scope.user_id, status=status)
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[AgentCommissionResponse](
          data=[build_commission_response(c) for c in items],
          pagination=pagination,
     )


@router.post(
     "/actions",
     response_model=ApiResponse[RecordActionResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Record an action performed for a client"
)
def record_action(body: RecordActionRequest, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.AGENT_PORTAL, Action.CREATE)
     transaction, commission = commission_service.record_agent_action(
          db,
          agent_id=scope.user_id,
          action_type=body.action_type,
          target_user_type=body.target_user_type,
          target_user_id=body.target_user_id,
          target_tenant_id=body.target_tenant_id,
          related_entity_type=body.related_entity_type,
          related_entity_id=body.related_entity_id,
          description=body.description,
          metadata=body.extra,
          transaction_amount=body.transaction_amount,
     )
     db.commit()
     return ApiResponse[RecordActionResponse](
          data=RecordActionResponse(
               transaction=_build_transaction_response(transaction),
               commission=_commission_or_none(commission),
          ),
          message="Action recorded",
     )


@router.post(
     "/payments",
     response_model=ApiResponse[AssistedPaymentResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Record a rent payment on a tenant's behalf"
)
def record_payment(
     body: AssistedPaymentRequest,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """The payment, the agent transaction and its commission commit together or not at all."""
     require_role(scope, Resource.AGENT_PORTAL, Action.CREATE)
     tenant = db.query(Tenant).filter(Tenant.id == body.tenant_id).first()
     if tenant is None:
          raise NotFoundError.for_entity("Tenant", body.tenant_id)

     payment = PaymentService.record(
          db, tenant, body.model_dump(), recorded_by=scope.user_id, agent_id=scope.user_id
     )
     transaction, commission = commission_service.record_agent_action(
          db,
          agent_id=scope.user_id,
          action_type=AgentActionType.RECORD_PAYMENT,
          target_user_type=TargetUserType.TENANT,
          target_user_id=tenant.user_account_id,
          target_tenant_id=tenant.id,
          related_entity_type="payment",
          related_entity_id=payment.id,
          description=f"Recorded {payment.amount} RWF payment for {tenant.full_name}",
          metadata={"period_month": payment.period_month, "period_year": payment.period_year},
          transaction_amount=payment.amount,
     )
     db.commit()
     return ApiResponse[AssistedPaymentResponse](
          data=AssistedPaymentResponse(
               payment=build_payment_response(payment),
               transaction=_build_transaction_response(transaction),
               commission=_commission_or_none(commission),
          ),
          message="Payment recorded",
     )


@router.post(
     "/properties",
     response_model=ApiResponse[AssistedPropertyResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Register a property for an owner"
)
def register_property(
     body: AssistedPropertyRequest,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.AGENT_PORTAL, Action.CREATE)
     prop = property_service.create_property(
          db, scope, body.model_dump(), owner_id=body.owner_id, agent_id=scope.user_id
     )
     transaction, commission = commission_service.record_agent_action(
          db,
          agent_id=scope.user_id,
          action_type=AgentActionType.ADD_PROPERTY,
          target_user_type=TargetUserType.OWNER,
          target_user_id=body.owner_id,
          related_entity_type="property",
          related_entity_id=prop.id,
          description=f"Registered property {prop.name}",
     )
     db.commit()
     return ApiResponse[AssistedPropertyResponse](
          data=AssistedPropertyResponse(
               property=build_property_response(prop, {}),
               transaction=_build_transaction_response(transaction),
               commission=_commission_or_none(commission),
          ),
          message="Property registered",
     )
