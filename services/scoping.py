# services/scoping.py
"""
Scoped query layer.

Every read of a property-owned resource starts from one of the builders below,
which apply the caller's AccessScope before any user supplied filter or
pagination. Rows outside the scope are indistinguishable from rows that do not
exist: detail lookups raise NotFoundError, lists simply omit them.

Check order for a request:
     1. authentication (401, dependencies.get_current_user)
     2. role policy (403, require_role) and scope membership (404 / omitted)
     3. manager capability for the verb (403, require_capability)
     4. business rules (400, in the services)
"""
from typing import Optional, Sequence, Tuple

from sqlalchemy import false, or_, select
from sqlalchemy.orm import Query, Session

from models import MaintenanceTicket, Payment, Property, Tenant, Unit
from models.enums import UserRole
from schemas.common import PaginationMeta
from .access_service import AccessScope
from .exceptions import ForbiddenError, NotFoundError
from .permissions import Capability
from .policy import Action, Resource, authorize, required_capability


# ---------------------------------------------------------------------------
# Policy / capability checks
# ---------------------------------------------------------------------------

def require_role(scope: AccessScope, resource: Resource, action: Action) -> None:
     if not authorize(scope.role, resource, action, scope.user_permissions):
          raise ForbiddenError("You do not have permission to perform this action")


def require_capability(scope: AccessScope, property_id: int, resource: Resource, action: Action) -> None:
     """403 when a manager lacks the flag `resource`/`action` needs on this property."""
     capability = required_capability(resource, action)
     if not scope.has_capability(property_id, capability):
          raise ForbiddenError(f"Manager permission '{capability.value}' is required for this property")


def check_property_filter(
     scope: AccessScope,
     property_id: Optional[int],
     resource: Resource,
     action: Action = Action.READ,
) -> None:
     """
     Explicit ?propertyId= filter on a list endpoint.

     An in-scope property the manager may not read this resource on is a 403;
     an out-of-scope id just produces an empty list downstream.
     """
     if property_id is None or not scope.can_see_property(property_id):
          return
     require_capability(scope, property_id, resource, action)


# ---------------------------------------------------------------------------
# Query builders
# ---------------------------------------------------------------------------

def _visible_ids(scope: AccessScope, capability: Optional[Capability]):
     return scope.property_ids_with(capability)


def property_query(
     db: Session,
     scope: AccessScope,
     capability: Optional[Capability] = None,
     include_deleted: bool = False,
) -> Query:
     query = db.query(Property)
     if not include_deleted:
          query = query.filter(Property.is_deleted.is_(False))
     ids = _visible_ids(scope, capability)
     if ids is not None:
          query = query.filter(Property.id.in_(ids)) if ids else query.filter(false())
     return query


def unit_query(db: Session, scope: AccessScope, capability: Optional[Capability] = None) -> Query:
     query = (
          db.query(Unit)
          .join(Property, Unit.property_id == Property.id)
          .filter(Property.is_deleted.is_(False))
     )
     if scope.role == UserRole.TENANT:
          if scope.tenant_id is None:
               return query.filter(false())
          own_unit = select(Tenant.unit_id).where(Tenant.id == scope.tenant_id)
          return query.filter(Unit.id.in_(own_unit))
     ids = _visible_ids(scope, capability)
     if ids is not None:
          query = query.filter(Unit.property_id.in_(ids)) if ids else query.filter(false())
     return query


def tenant_query(db: Session, scope: AccessScope, capability: Optional[Capability] = None) -> Query:
     query = db.query(Tenant)
     if scope.is_unrestricted:
          return query
     if scope.role == UserRole.TENANT:
          if scope.tenant_id is None:
               return query.filter(false())
          return query.filter(Tenant.id == scope.tenant_id)

     ids = _visible_ids(scope, capability)
     units_in_scope = select(Unit.id).where(Unit.property_id.in_(ids or []))
     conditions = []
     if ids:
          conditions.append(Tenant.unit_id.in_(units_in_scope))
     if scope.role in (UserRole.OWNER, UserRole.AGENCY):
          # Unassigned tenants still belong to the landlord who created them
          conditions.append(Tenant.user_id == scope.user_id)
     if not conditions:
          return query.filter(false())
     return query.filter(or_(*conditions))


def payment_query(db: Session, scope: AccessScope, capability: Optional[Capability] = None) -> Query:
     query = db.query(Payment)
     if scope.is_unrestricted:
          return query
     if scope.role == UserRole.TENANT:
          if scope.tenant_id is None:
               return query.filter(false())
          return query.filter(Payment.tenant_id == scope.tenant_id)
     ids = _visible_ids(scope, capability)
     if not ids:
          return query.filter(false())
     units_in_scope = select(Unit.id).where(Unit.property_id.in_(ids))
     return query.filter(Payment.unit_id.in_(units_in_scope))


def ticket_query(db: Session, scope: AccessScope, capability: Optional[Capability] = None) -> Query:
     query = db.query(MaintenanceTicket)
     if scope.is_unrestricted:
          return query
     if scope.role == UserRole.MAINTENANCE:
          return query.filter(MaintenanceTicket.assigned_to == scope.user_id)
     if scope.role == UserRole.TENANT:
          if scope.tenant_id is None:
               return query.filter(false())
          return query.filter(MaintenanceTicket.tenant_id == scope.tenant_id)
     ids = _visible_ids(scope, capability)
     if not ids:
          return query.filter(false())
     units_in_scope = select(Unit.id).where(Unit.property_id.in_(ids))
     return query.filter(MaintenanceTicket.unit_id.in_(units_in_scope))


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

def get_or_404(query: Query, model, entity_id: int, entity_name: str):
     row = query.filter(model.id == entity_id).first()
     if row is None:
          raise NotFoundError.for_entity(entity_name, entity_id)
     return row


def property_id_of(row) -> Optional[int]:
     """The property a scoped row hangs off; None for a tenant without a unit."""
     if isinstance(row, Property):
          return row.id
     if isinstance(row, Unit):
          return row.property_id
     unit = row.unit
     return unit.property_id if unit is not None else None


def paginate(query: Query, page: int, page_size: int) -> Tuple[Sequence, PaginationMeta]:
     total = query.order_by(None).count()
     items = query.offset((page - 1) * page_size).limit(page_size).all()
     return items, PaginationMeta.build(total, page, page_size)
