# services/tenant_service.py
"""
Tenant Service - tenant records and unit occupancy.

A unit's status and its tenants' unit_id always change together, inside the
request's transaction:

     assign   : old unit -> vacant, tenant.unit_id = new, new unit -> occupied
     unassign : unit -> vacant, tenant.unit_id = None, status exited
     delete   : unit -> vacant, tenant row removed
"""
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models import MaintenanceTicket, ReminderLog, Tenant, Unit, User
from models.enums import (
     AuditEntityType,
     NotificationType,
     TenantStatus,
     UnitStatus,
     UserRole,
)
from logging_config import logger
from . import audit_service, notification_service
from .access_service import AccessScope
from .exceptions import BusinessRuleError
from .policy import Action, Resource
from .scoping import get_or_404, require_capability, tenant_query, unit_query


class TenantService:
     """Service class for tenant-related business logic."""

     @staticmethod
     def search(
          db: Session,
          scope: AccessScope,
          capability=None,
          search: Optional[str] = None,
          status: Optional[TenantStatus] = None,
          property_id: Optional[int] = None,
     ):
          query = tenant_query(db, scope, capability)
          if search:
               like = f"%{search.strip()}%"
               query = query.filter(
                    or_(
                         Tenant.first_name.ilike(like),
                         Tenant.last_name.ilike(like),
                         Tenant.email.ilike(like),
                         Tenant.phone.ilike(like),
                    )
               )
          if status is not None:
               query = query.filter(Tenant.status == status)
          if property_id is not None:
               query = query.filter(
                    Tenant.unit_id.in_(db.query(Unit.id).filter(Unit.property_id == property_id))
               )
          return query.order_by(Tenant.created_at.desc(), Tenant.id.desc())

     @staticmethod
     def get(db: Session, scope: AccessScope, tenant_id: int, action: Action = Action.READ) -> Tenant:
          """Tenant in scope (404 otherwise) that the caller may `action` (403 otherwise)."""
          tenant = get_or_404(tenant_query(db, scope), Tenant, tenant_id, "Tenant")
          if tenant.unit is not None:
               require_capability(scope, tenant.unit.property_id, Resource.TENANT, action)
          return tenant

     @staticmethod
     def occupant(db: Session, unit_id: int, exclude_tenant_id: Optional[int] = None) -> Optional[Tenant]:
          query = db.query(Tenant).filter(Tenant.unit_id == unit_id, Tenant.status != TenantStatus.EXITED)
          if exclude_tenant_id is not None:
               query = query.filter(Tenant.id != exclude_tenant_id)
          return query.first()

     @staticmethod
     def _writable_unit(db: Session, scope: AccessScope, unit_id: int, action: Action) -> Unit:
          unit = get_or_404(unit_query(db, scope), Unit, unit_id, "Unit")
          require_capability(scope, unit.property_id, Resource.TENANT, action)
          return unit

     @staticmethod
     def link_account(db: Session, tenant: Tenant) -> None:
          """Attach an existing tenant-role login with the same email, if there is one."""
          if tenant.user_account_id is not None or not tenant.email:
               return
          user = (
               db.query(User)
               .filter(func.lower(User.email) == tenant.email.strip().lower(), User.role == UserRole.TENANT)
               .first()
          )
          if user is None:
               return
          already_linked = db.query(Tenant.id).filter(Tenant.user_account_id == user.id).first()
          if not already_linked:
               tenant.user_account_id = user.id

     @staticmethod
     def create(db: Session, scope: AccessScope, data: dict, agent_id: Optional[int] = None) -> Tenant:
          data = dict(data)
          unit_id = data.pop("unit_id", None)
          unit = None
          if unit_id is not None:
               unit = TenantService._writable_unit(db, scope, unit_id, Action.CREATE)
               if TenantService.occupant(db, unit.id):
                    raise BusinessRuleError("Unit is already occupied")
               owner_id = unit.property.user_id
          elif scope.role == UserRole.MANAGER:
               raise BusinessRuleError("unitId is required when a manager creates a tenant")
          else:
               owner_id = scope.user_id

          tenant = Tenant(
               **data,
               user_id=owner_id,
               unit_id=unit.id if unit else None,
               status=TenantStatus.ACTIVE,
               performed_by_agent_id=agent_id,
          )
          if unit is not None:
               unit.status = UnitStatus.OCCUPIED
          TenantService.link_account(db, tenant)
          db.add(tenant)
          db.flush()

          audit_service.record(db, scope.user_id, "tenant.create", AuditEntityType.TENANT, tenant.id,
                               f"Created tenant {tenant.full_name}")
          if unit is not None:
               notification_service.notify_many(
                    db,
                    notification_service.property_stakeholders(db, unit.property_id, exclude=scope.user_id),
                    type=NotificationType.TENANT_ADDED,
                    title="New tenant",
                    message=f"{tenant.full_name} moved into unit {unit.unit_number}",
                    entity_type=AuditEntityType.TENANT,
                    entity_id=tenant.id,
               )
          logger.info("Tenant %s created by user %s", tenant.id, scope.user_id)
          return tenant

     @staticmethod
     def update(db: Session, scope: AccessScope, tenant_id: int, changes: dict) -> Tenant:
          tenant = TenantService.get(db, scope, tenant_id, Action.UPDATE)
          new_status = changes.get("status")
          if new_status == TenantStatus.EXITED and tenant.unit_id is not None:
               raise BusinessRuleError("Use the unassign endpoint to move a tenant out")
          if new_status in (TenantStatus.ACTIVE, TenantStatus.LATE) and tenant.unit_id is None:
               raise BusinessRuleError("Assign the tenant to a unit first")
          for key, value in changes.items():
               setattr(tenant, key, value)
          if "email" in changes:
               TenantService.link_account(db, tenant)
          db.flush()
          audit_service.record(db, scope.user_id, "tenant.update", AuditEntityType.TENANT, tenant.id,
                               metadata={"fields": sorted(changes)})
          return tenant

     @staticmethod
     def assign(
          db: Session,
          scope: AccessScope,
          tenant_id: int,
          unit_id: int,
          lease_start_date=None,
          lease_end_date=None,
     ) -> Tenant:
          tenant = TenantService.get(db, scope, tenant_id, Action.UPDATE)
          new_unit = TenantService._writable_unit(db, scope, unit_id, Action.UPDATE)
          if TenantService.occupant(db, new_unit.id, exclude_tenant_id=tenant.id):
               raise BusinessRuleError("Unit is already occupied by another tenant")

          old_unit = tenant.unit
          if old_unit is not None and old_unit.id != new_unit.id:
               old_unit.status = UnitStatus.VACANT

          tenant.unit_id = new_unit.id
          tenant.unit = new_unit
          tenant.status = TenantStatus.ACTIVE
          if lease_start_date is not None:
               tenant.lease_start_date = lease_start_date
          if lease_end_date is not None:
               tenant.lease_end_date = lease_end_date
          new_unit.status = UnitStatus.OCCUPIED
          db.flush()

          audit_service.record(
               db, scope.user_id, "tenant.lease_start", AuditEntityType.TENANT, tenant.id,
               f"Assigned to unit {new_unit.unit_number}",
               metadata={"from_unit_id": old_unit.id if old_unit else None, "to_unit_id": new_unit.id},
          )
          logger.info("Tenant %s assigned to unit %s", tenant.id, new_unit.id)
          return tenant

     @staticmethod
     def unassign(db: Session, scope: AccessScope, tenant_id: int) -> Tenant:
          tenant = TenantService.get(db, scope, tenant_id, Action.UPDATE)
          if tenant.unit is None:
               raise BusinessRuleError("Tenant is not assigned to any unit")

          unit = tenant.unit
          unit.status = UnitStatus.VACANT
          tenant.unit_id = None
          tenant.unit = None
          tenant.status = TenantStatus.EXITED
          db.flush()

          audit_service.record(db, scope.user_id, "tenant.lease_end", AuditEntityType.TENANT, tenant.id,
                               f"Moved out of unit {unit.unit_number}", metadata={"unit_id": unit.id})
          notification_service.notify_many(
               db,
               notification_service.property_stakeholders(db, unit.property_id, exclude=scope.user_id),
               type=NotificationType.TENANT_REMOVED,
               title="Tenant moved out",
               message=f"{tenant.full_name} moved out of unit {unit.unit_number}",
               entity_type=AuditEntityType.TENANT,
               entity_id=tenant.id,
          )
          return tenant

     @staticmethod
     def delete(db: Session, scope: AccessScope, tenant_id: int) -> None:
          tenant = TenantService.get(db, scope, tenant_id, Action.DELETE)
          if tenant.unit is not None:
               tenant.unit.status = UnitStatus.VACANT

          db.query(MaintenanceTicket).filter(MaintenanceTicket.tenant_id == tenant.id).update(
               {"tenant_id": None}, synchronize_session=False
          )
          db.query(ReminderLog).filter(ReminderLog.tenant_id == tenant.id).delete(synchronize_session=False)

          audit_service.record(db, scope.user_id, "tenant.delete", AuditEntityType.TENANT, tenant.id,
                               f"Deleted tenant {tenant.full_name}")
          db.delete(tenant)
          db.flush()
          logger.info("Tenant %s deleted by user %s", tenant_id, scope.user_id)
