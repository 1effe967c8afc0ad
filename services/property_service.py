# services/property_service.py
"""
Property and unit business logic.

Properties are soft deleted; units are hard deleted, and deleting a unit
moves its tenants out (unit_id null, status exited) instead of deleting them.
"""
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models import Property, Tenant, Unit, User
from models.enums import AuditEntityType, PropertyType, TenantStatus, UnitStatus, UserRole
from logging_config import logger
from . import audit_service
from .access_service import AccessScope
from .exceptions import BusinessRuleError, ConflictError, ForbiddenError
from .policy import Action, Resource
from .scoping import get_or_404, property_query, require_capability, unit_query


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

def search_properties(
     db: Session,
     scope: AccessScope,
     search: Optional[str] = None,
     type: Optional[PropertyType] = None,
     city: Optional[str] = None,
):
     query = property_query(db, scope)
     if search:
          like = f"%{search.strip()}%"
          query = query.filter(or_(Property.name.ilike(like), Property.address.ilike(like)))
     if type is not None:
          query = query.filter(Property.type == type)
     if city:
          query = query.filter(Property.city.ilike(city.strip()))
     return query.order_by(Property.created_at.desc(), Property.id.desc())


def unit_counts(db: Session, property_ids: Iterable[int]) -> Dict[int, Tuple[int, int]]:
     """property_id -> (total units, occupied units)."""
     ids = list(property_ids)
     if not ids:
          return {}
     rows = (
          db.query(Unit.property_id, Unit.status, func.count(Unit.id))
          .filter(Unit.property_id.in_(ids))
          .group_by(Unit.property_id, Unit.status)
          .all()
     )
     counts = {pid: [0, 0] for pid in ids}
     for property_id, status, count in rows:
          counts[property_id][0] += count
          if status == UnitStatus.OCCUPIED:
               counts[property_id][1] += count
     return {pid: (total, occupied) for pid, (total, occupied) in counts.items()}


def get_property(db: Session, scope: AccessScope, property_id: int) -> Property:
     return get_or_404(property_query(db, scope), Property, property_id, "Property")


def _check_agency(db: Session, agency_id: Optional[int]) -> None:
     if agency_id is None:
          return
     agency = db.query(User).filter(User.id == agency_id).first()
     if agency is None or agency.role != UserRole.AGENCY:
          raise BusinessRuleError("agencyId must reference an agency account")


def create_property(
     db: Session,
     scope: AccessScope,
     data: dict,
     owner_id: Optional[int] = None,
     agent_id: Optional[int] = None,
) -> Property:
     """
     Create a property for `owner_id` (super admins and agents acting for an
     owner) or for the caller.
     """
     data = dict(data)
     data.pop("owner_id", None)
     _check_agency(db, data.get("agency_id"))

     if owner_id is None:
          owner_id = scope.user_id
     else:
          owner = db.query(User).filter(User.id == owner_id).first()
          if owner is None or owner.role not in (UserRole.OWNER, UserRole.AGENCY):
               raise BusinessRuleError("ownerId must reference an owner or agency account")

     prop = Property(**data, user_id=owner_id, performed_by_agent_id=agent_id)
     db.add(prop)
     db.flush()
     audit_service.record(db, scope.user_id, "property.create", AuditEntityType.PROPERTY, prop.id,
                          f"Created property {prop.name}")
     logger.info("Property %s created for owner %s", prop.id, owner_id)
     return prop


def update_property(db: Session, scope: AccessScope, property_id: int, changes: dict) -> Property:
     prop = get_property(db, scope, property_id)
     require_capability(scope, prop.id, Resource.PROPERTY, Action.UPDATE)
     for key, value in changes.items():
          setattr(prop, key, value)
     db.flush()
     audit_service.record(db, scope.user_id, "property.update", AuditEntityType.PROPERTY, prop.id,
                          metadata={"fields": sorted(changes)})
     return prop


def soft_delete_property(db: Session, scope: AccessScope, property_id: int) -> Property:
     prop = get_property(db, scope, property_id)
     if not scope.is_super_admin and prop.user_id != scope.user_id:
          raise ForbiddenError("Only the property owner can delete this property")
     prop.soft_delete(scope.user_id)
     db.flush()
     audit_service.record(db, scope.user_id, "property.delete", AuditEntityType.PROPERTY, prop.id,
                          f"Soft deleted property {prop.name}")
     logger.info("Property %s soft deleted by %s", prop.id, scope.user_id)
     return prop


def deleted_properties_query(db: Session, scope: AccessScope):
     return (
          property_query(db, scope, include_deleted=True)
          .filter(Property.is_deleted.is_(True))
          .order_by(Property.deleted_at.desc())
     )


def restore_property(db: Session, scope: AccessScope, property_id: int) -> Property:
     prop = get_or_404(deleted_properties_query(db, scope), Property, property_id, "Deleted property")
     prop.is_deleted = False
     prop.deleted_at = None
     prop.deleted_by = None
     db.flush()
     audit_service.record(db, scope.user_id, "property.restore", AuditEntityType.PROPERTY, prop.id)
     return prop


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

def current_tenants(db: Session, unit_ids: Iterable[int]) -> Dict[int, Tenant]:
     """unit_id -> the tenant currently living there (active or late)."""
     ids = list(unit_ids)
     if not ids:
          return {}
     rows = (
          db.query(Tenant)
          .filter(Tenant.unit_id.in_(ids), Tenant.status != TenantStatus.EXITED)
          .all()
     )
     return {t.unit_id: t for t in rows}


def search_units(
     db: Session,
     scope: AccessScope,
     property_id: Optional[int] = None,
     status: Optional[UnitStatus] = None,
):
     query = unit_query(db, scope)
     if property_id is not None:
          query = query.filter(Unit.property_id == property_id)
     if status is not None:
          query = query.filter(Unit.status == status)
     return query.order_by(Unit.property_id, Unit.unit_number)


def get_unit(db: Session, scope: AccessScope, unit_id: int) -> Unit:
     return get_or_404(unit_query(db, scope), Unit, unit_id, "Unit")


def _ensure_unique_number(db: Session, property_id: int, unit_number: str, exclude_id: Optional[int] = None) -> None:
     query = db.query(Unit.id).filter(Unit.property_id == property_id, Unit.unit_number == unit_number)
     if exclude_id is not None:
          query = query.filter(Unit.id != exclude_id)
     if query.first():
          raise ConflictError(f"Unit {unit_number} already exists in this property")


def create_unit(db: Session, scope: AccessScope, data: dict) -> Unit:
     prop = get_property(db, scope, data["property_id"])
     require_capability(scope, prop.id, Resource.UNIT, Action.CREATE)
     _ensure_unique_number(db, prop.id, data["unit_number"])
     unit = Unit(**data, status=UnitStatus.VACANT)
     db.add(unit)
     db.flush()
     audit_service.record(db, scope.user_id, "unit.create", AuditEntityType.UNIT, unit.id,
                          f"Created unit {unit.unit_number} in {prop.name}")
     return unit


def update_unit(db: Session, scope: AccessScope, unit_id: int, changes: dict) -> Unit:
     unit = get_unit(db, scope, unit_id)
     require_capability(scope, unit.property_id, Resource.UNIT, Action.UPDATE)

     new_status = changes.get("status")
     if new_status is not None:
          occupied = unit.id in current_tenants(db, [unit.id])
          if new_status == UnitStatus.OCCUPIED and not occupied:
               raise BusinessRuleError("A unit becomes occupied by assigning a tenant to it")
          if new_status != UnitStatus.OCCUPIED and occupied:
               raise BusinessRuleError("Unassign the current tenant before changing the unit status")
     if changes.get("unit_number"):
          _ensure_unique_number(db, unit.property_id, changes["unit_number"], exclude_id=unit.id)

     for key, value in changes.items():
          setattr(unit, key, value)
     db.flush()
     audit_service.record(db, scope.user_id, "unit.update", AuditEntityType.UNIT, unit.id,
                          metadata={"fields": sorted(changes)})
     return unit


def delete_unit(db: Session, scope: AccessScope, unit_id: int) -> None:
     unit = get_unit(db, scope, unit_id)
     require_capability(scope, unit.property_id, Resource.UNIT, Action.DELETE)

     # Tenants outlive the unit: move them out rather than deleting them
     for tenant in db.query(Tenant).filter(Tenant.unit_id == unit.id).all():
          tenant.unit_id = None
          tenant.status = TenantStatus.EXITED
     db.flush()

     audit_service.record(db, scope.user_id, "unit.delete", AuditEntityType.UNIT, unit.id,
                          f"Deleted unit {unit.unit_number}")
     db.delete(unit)
     db.flush()
     logger.info("Unit %s deleted by %s", unit_id, scope.user_id)
