# routers/payments.py
"""
Payment API routes.

Rent payments are recorded against a tenant's current unit. Reads keep
resolving the property name and address after the property is soft deleted.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import Payment
from models.enums import PaymentMethod
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from schemas.payment import PaymentCreate, PaymentResponse, TenantBalanceResponse
from services.access_service import AccessScope
from services.payment_service import PaymentService
from services.permissions import Capability
from services.policy import Action, Resource
from services.scoping import check_property_filter, paginate, require_role

router = APIRouter(prefix="/api/payments", tags=["payments"])


def build_payment_response(payment: Payment) -> PaymentResponse:
     response = PaymentResponse.model_validate(payment)
     if payment.tenant is not None:
          response.tenant_name = payment.tenant.full_name
     if payment.unit is not None:
          response.unit_number = payment.unit.unit_number
     prop = PaymentService.property_of(payment)
     if prop is not None:
          response.property_id = prop.id
          response.property_name = prop.name
          response.property_address = prop.address
     return response


@router.get(
     "",
     response_model=PaginatedResponse[PaymentResponse],
     summary="List payments"
)
def list_payments(
     tenant_id: Optional[int] = Query(None, alias="tenantId", description="Filter by tenant"),
     property_id: Optional[int] = Query(None, alias="propertyId", description="Filter by property"),
     period_month: Optional[int] = Query(None, ge=1, le=12, alias="periodMonth", description="Rent month"),
     period_year: Optional[int] = Query(None, alias="periodYear", description="Rent year"),
     payment_method: Optional[PaymentMethod] = Query(None, alias="paymentMethod", description="cash, momo or bank"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.PAYMENT, Action.READ)
     check_property_filter(scope, property_id, Resource.PAYMENT)
     query = PaymentService.search(
          db, scope, Capability.VIEW_PAYMENTS,
          tenant_id=tenant_id,
          property_id=property_id,
          period_month=period_month,
          period_year=period_year,
          payment_method=payment_method,
     )
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[PaymentResponse](
          data=[build_payment_response(p) for p in items],
          pagination=pagination,
     )


@router.get(
     "/tenant/{tenant_id}/balance",
     response_model=ApiResponse[TenantBalanceResponse],
     summary="Outstanding rent for a tenant"
)
def get_tenant_balance(tenant_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.PAYMENT, Action.READ)
     balance = PaymentService.balance(db, scope, tenant_id)
     return ApiResponse[TenantBalanceResponse](data=TenantBalanceResponse.model_validate(balance))


@router.get(
     "/{payment_id}",
     response_model=ApiResponse[PaymentResponse],
     summary="Get a payment"
)
def get_payment(payment_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.PAYMENT, Action.READ)
     return ApiResponse[PaymentResponse](data=build_payment_response(PaymentService.get(db, scope, payment_id)))


@router.post(
     "",
     response_model=ApiResponse[PaymentResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Record a rent payment"
)
def create_payment(body: PaymentCreate, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     """
     Record a payment for a tenant.

     - **periodMonth**: 1-12, the rent month being paid
     - a tenant marked late becomes active again
     """
     require_role(scope, Resource.PAYMENT, Action.CREATE)
     payment = PaymentService.create(db, scope, body.model_dump())
     db.commit()
     return ApiResponse[PaymentResponse](data=build_payment_response(payment), message="Payment recorded")


@router.delete(
     "/{payment_id}",
     response_model=MessageResponse,
     summary="Delete a payment"
)
def delete_payment(payment_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.PAYMENT, Action.DELETE)
     PaymentService.delete(db, scope, payment_id)
     db.commit()
     return MessageResponse(message="Payment deleted")
