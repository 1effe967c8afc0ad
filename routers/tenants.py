# routers/tenants.py
"""
Tenant API routes.

Role-based access:
- Owner / Agency: tenants on their properties plus the unassigned tenants they created
- Manager: tenants on properties where they hold can_view_tenants (writes need can_edit_tenants)
- Tenant: their own record
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import Tenant
from models.enums import TenantStatus
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from schemas.tenant import TenantAssign, TenantCreate, TenantResponse, TenantUpdate
from services.access_service import AccessScope
from services.permissions import Capability
from services.policy import Action, Resource
from services.scoping import check_property_filter, paginate, require_role
from services.tenant_service import TenantService

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


def _build_tenant_response(tenant: Tenant) -> TenantResponse:
     response = TenantResponse.model_validate(tenant)
     if tenant.unit is not None:
          response.unit_number = tenant.unit.unit_number
          response.property_id = tenant.unit.property_id
          response.property_name = tenant.unit.property.name
     return response


@router.get(
     "",
     response_model=PaginatedResponse[TenantResponse],
     summary="List tenants"
)
def list_tenants(
     search: Optional[str] = Query(None, description="Match on name, email or phone"),
     status: Optional[TenantStatus] = Query(None, description="Filter by status"),
     property_id: Optional[int] = Query(None, alias="propertyId", description="Filter by property"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.TENANT, Action.READ)
     check_property_filter(scope, property_id, Resource.TENANT)
     query = TenantService.search(
          db, scope, Capability.VIEW_TENANTS, search=search, status=status, property_id=property_id
     )
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[TenantResponse](
          data=[_build_tenant_response(t) for t in items],
          pagination=pagination,
     )


@router.get(
     "/{tenant_id}",
     response_model=ApiResponse[TenantResponse],
     summary="Get a tenant"
)
def get_tenant(tenant_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.TENANT, Action.READ)
     return ApiResponse[TenantResponse](data=_build_tenant_response(TenantService.get(db, scope, tenant_id)))


@router.post(
     "",
     response_model=ApiResponse[TenantResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Create a tenant"
)
def create_tenant(body: TenantCreate, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     """
     Create a tenant, optionally moving them straight into a vacant unit.

     Managers must provide **unitId** on a property where they hold can_edit_tenants.
     """
     require_role(scope, Resource.TENANT, Action.CREATE)
     tenant = TenantService.create(db, scope, body.model_dump())
     db.commit()
     return ApiResponse[TenantResponse](data=_build_tenant_response(tenant), message="Tenant created")


@router.put(
     "/{tenant_id}",
     response_model=ApiResponse[TenantResponse],
     summary="Update a tenant"
)
def update_tenant(
     tenant_id: int,
     body: TenantUpdate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.TENANT, Action.UPDATE)
     tenant = TenantService.update(db, scope, tenant_id, body.model_dump(exclude_unset=True))
     db.commit()
     return ApiResponse[TenantResponse](data=_build_tenant_response(tenant), message="Tenant updated")


@router.delete(
     "/{tenant_id}",
     response_model=MessageResponse,
     summary="Delete a tenant"
)
def delete_tenant(tenant_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.TENANT, Action.DELETE)
     TenantService.delete(db, scope, tenant_id)
     db.commit()
     return MessageResponse(message="Tenant deleted")


@router.post(
     "/{tenant_id}/assign",
     response_model=ApiResponse[TenantResponse],
     summary="Move a tenant into a unit"
)
def assign_tenant(
     tenant_id: int,
     body: TenantAssign,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """The previous unit is vacated and the new one occupied in the same transaction."""
     require_role(scope, Resource.TENANT, Action.UPDATE)
     tenant = TenantService.assign(
          db, scope, tenant_id, body.unit_id,
          lease_start_date=body.lease_start_date,
          lease_end_date=body.lease_end_date,
     )
     db.commit()
     return ApiResponse[TenantResponse](data=_build_tenant_response(tenant), message="Tenant assigned")


@router.post(
     "/{tenant_id}/unassign",
     response_model=ApiResponse[TenantResponse],
     summary="Move a tenant out of their unit"
)
def unassign_tenant(tenant_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.TENANT, Action.UPDATE)
     tenant = TenantService.unassign(db, scope, tenant_id)
     db.commit()
     return ApiResponse[TenantResponse](data=_build_tenant_response(tenant), message="Tenant unassigned")
