# routers/audit.py
"""
Audit log routes. Audit rows are append-only, so there is no write surface.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import MaintenanceTicket, Payment, Property, Tenant, Unit
from models.enums import AuditEntityType
from schemas.audit import AuditLogResponse
from schemas.common import PaginatedResponse
from services import audit_service, document_service
from services.access_service import AccessScope
from services.exceptions import ForbiddenError
from services.policy import Action, Resource
from services.scoping import (
     get_or_404,
     paginate,
     payment_query,
     property_id_of,
     property_query,
     require_capability,
     require_role,
     tenant_query,
     ticket_query,
     unit_query,
)

router = APIRouter(prefix="/api/audit", tags=["audit"])

# Entity types whose visibility follows the scoped query builders and, for
# managers, the view capability of the matching resource.
SCOPED_ENTITIES = {
     AuditEntityType.PROPERTY: (property_query, Property, "Property", Resource.PROPERTY),
     AuditEntityType.UNIT: (unit_query, Unit, "Unit", Resource.UNIT),
     AuditEntityType.TENANT: (tenant_query, Tenant, "Tenant", Resource.TENANT),
     AuditEntityType.PAYMENT: (payment_query, Payment, "Payment", Resource.PAYMENT),
     AuditEntityType.MAINTENANCE: (ticket_query, MaintenanceTicket, "Maintenance ticket", Resource.MAINTENANCE),
}


def _ensure_entity_visible(db: Session, scope: AccessScope, entity_type: AuditEntityType, entity_id: int) -> None:
     if scope.is_super_admin:
          return
     if entity_type in SCOPED_ENTITIES:
          builder, model, name, resource = SCOPED_ENTITIES[entity_type]
          row = get_or_404(builder(db, scope), model, entity_id, name)
          require_capability(scope, property_id_of(row), resource, Action.READ)
     elif entity_type == AuditEntityType.DOCUMENT:
          document_service.get_document(db, scope, entity_id)
     else:
          raise ForbiddenError("Only administrators can view this audit trail")


def _page(query, page: int, page_size: int) -> PaginatedResponse[AuditLogResponse]:
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[AuditLogResponse](
          data=[AuditLogResponse.model_validate(a) for a in items],
          pagination=pagination,
     )


@router.get(
     "",
     response_model=PaginatedResponse[AuditLogResponse],
     summary="My audit trail"
)
def my_audit_logs(
     action: Optional[str] = Query(None, description="Exact action name, e.g. payment.create"),
     entity_type: Optional[AuditEntityType] = Query(None, alias="entityType", description="Filter by entity type"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.AUDIT, Action.READ)
     query = audit_service.logs_query(db, user_id=scope.user_id, entity_type=entity_type, action=action)
     return _page(query, page, page_size)


@router.get(
     "/all",
     response_model=PaginatedResponse[AuditLogResponse],
     summary="Every audit entry (administrators only)"
)
def all_audit_logs(
     user_id: Optional[int] = Query(None, alias="userId", description="Filter by acting user"),
     action: Optional[str] = Query(None, description="Exact action name"),
     entity_type: Optional[AuditEntityType] = Query(None, alias="entityType", description="Filter by entity type"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     if not scope.is_super_admin:
          raise ForbiddenError("Only administrators can view all audit logs")
     query = audit_service.logs_query(db, user_id=user_id, entity_type=entity_type, action=action)
     return _page(query, page, page_size)


@router.get(
     "/entity/{entity_type}/{entity_id}",
     response_model=PaginatedResponse[AuditLogResponse],
     summary="Audit trail of one entity"
)
def entity_audit_logs(
     entity_type: AuditEntityType,
     entity_id: int,
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """The entity must be visible to the caller (404 otherwise)."""
     require_role(scope, Resource.AUDIT, Action.READ)
     _ensure_entity_visible(db, scope, entity_type, entity_id)
     query = audit_service.logs_query(db, entity_type=entity_type, entity_id=entity_id)
     return _page(query, page, page_size)
