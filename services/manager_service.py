# services/manager_service.py
"""
Manager Service - owners delegating properties to managers.

An invitation creates a *pending* PropertyManager row; it grants nothing until
the manager accepts it from the manager portal. Revoked assignments are kept
and can be re-invited, which puts them back to pending.
"""
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Property, PropertyManager, User
from models.enums import AuditEntityType, ManagerStatus, NotificationType, UserRole
from schemas.manager import ManagerPermissions
from utils.email import send_manager_invitation
from logging_config import logger
from . import audit_service, notification_service
from .access_service import AccessScope
from .auth_service import create_user, generate_temp_password, get_user_by_email
from .exceptions import BusinessRuleError, ConflictError, ForbiddenError, NotFoundError
from .property_service import get_property


def _owned_property(db: Session, scope: AccessScope, property_id: int) -> Property:
     prop = get_property(db, scope, property_id)
     if not scope.is_super_admin and scope.user_id not in (prop.user_id, prop.agency_id):
          raise ForbiddenError("Only the property owner can manage its managers")
     return prop


def _find_assignment(db: Session, property_id: int, manager_id: int) -> Optional[PropertyManager]:
     return (
          db.query(PropertyManager)
          .filter(PropertyManager.property_id == property_id, PropertyManager.manager_id == manager_id)
          .first()
     )


def _get_assignment(db: Session, property_id: int, manager_id: int) -> PropertyManager:
     assignment = _find_assignment(db, property_id, manager_id)
     if assignment is None:
          raise NotFoundError("Manager is not assigned to this property")
     return assignment


def list_property_managers(db: Session, scope: AccessScope, property_id: int) -> List[PropertyManager]:
     prop = _owned_property(db, scope, property_id)
     return (
          db.query(PropertyManager)
          .filter(PropertyManager.property_id == prop.id)
          .order_by(PropertyManager.created_at.desc())
          .all()
     )


def list_all_managers(db: Session, scope: AccessScope) -> List[PropertyManager]:
     query = db.query(PropertyManager).join(Property, PropertyManager.property_id == Property.id)
     query = query.filter(Property.is_deleted.is_(False))
     if not scope.is_super_admin:
          query = query.filter((Property.user_id == scope.user_id) | (Property.agency_id == scope.user_id))
     return query.order_by(PropertyManager.created_at.desc()).all()


def invite_manager(
     db: Session,
     scope: AccessScope,
     property_id: int,
     email: str,
     permissions: ManagerPermissions,
     first_name: Optional[str] = None,
     last_name: Optional[str] = None,
     phone: Optional[str] = None,
) -> PropertyManager:
     """
     Invite `email` to manage a property.

     - unknown email: a manager account is created and emailed credentials
     - existing user with another role: 400
     - revoked assignment: re-opened as pending with the new permissions
     - any other existing assignment: 409
     """
     prop = _owned_property(db, scope, property_id)

     temp_password = None
     manager = get_user_by_email(db, email)
     if manager is None:
          temp_password = generate_temp_password()
          manager = create_user(
               db,
               email=email,
               password=temp_password,
               role=UserRole.MANAGER,
               first_name=first_name,
               last_name=last_name,
               phone=phone,
          )
     elif manager.role != UserRole.MANAGER:
          raise BusinessRuleError("User exists with a different role and cannot be added as a manager")

     stored_permissions = permissions.model_dump()
     existing = _find_assignment(db, prop.id, manager.id)
     if existing is not None:
          if existing.status != ManagerStatus.REVOKED:
               raise ConflictError("duplicate manager assignment")
          existing.status = ManagerStatus.PENDING
          existing.permissions = stored_permissions
          existing.invited_by = scope.user_id
          assignment = existing
     else:
          assignment = PropertyManager(
               property_id=prop.id,
               manager_id=manager.id,
               invited_by=scope.user_id,
               permissions=stored_permissions,
               status=ManagerStatus.PENDING,
          )
          db.add(assignment)

     try:
          db.flush()
     except IntegrityError:
          # A concurrent invite for the same (property, manager) won the race
          db.rollback()
          raise ConflictError("duplicate manager assignment")

     audit_service.record(db, scope.user_id, "manager.invite", AuditEntityType.MANAGER, assignment.id,
                          f"Invited {manager.email} to manage {prop.name}",
                          metadata={"property_id": prop.id, "manager_id": manager.id})
     notification_service.notify(
          db, manager.id, NotificationType.SYSTEM, "Property manager invitation",
          f"You have been invited to manage {prop.name}",
          entity_type=AuditEntityType.PROPERTY, entity_id=prop.id, action_url="/manager/invitations",
     )
     send_manager_invitation(manager.email, prop.name, temp_password)
     logger.info("Manager %s invited to property %s", manager.id, prop.id)
     return assignment


def update_manager(
     db: Session,
     scope: AccessScope,
     property_id: int,
     manager_id: int,
     permissions: Optional[ManagerPermissions] = None,
     status: Optional[ManagerStatus] = None,
) -> PropertyManager:
     prop = _owned_property(db, scope, property_id)
     assignment = _get_assignment(db, prop.id, manager_id)

     if permissions is not None:
          assignment.permissions = permissions.model_dump()
     if status is not None:
          if status == ManagerStatus.ACTIVE and assignment.status != ManagerStatus.ACTIVE:
               raise BusinessRuleError("Only the manager can accept an invitation")
          assignment.status = status
     db.flush()
     audit_service.record(db, scope.user_id, "manager.permissions_change", AuditEntityType.MANAGER, assignment.id,
                          metadata={"permissions": assignment.permissions, "status": ManagerStatus(assignment.status).value})
     return assignment


def revoke_manager(db: Session, scope: AccessScope, property_id: int, manager_id: int) -> PropertyManager:
     prop = _owned_property(db, scope, property_id)
     assignment = _get_assignment(db, prop.id, manager_id)
     assignment.status = ManagerStatus.REVOKED
     db.flush()
     audit_service.record(db, scope.user_id, "manager.remove", AuditEntityType.MANAGER, assignment.id,
                          metadata={"property_id": prop.id, "manager_id": manager_id})
     return assignment


# ---------------------------------------------------------------------------
# Manager portal
# ---------------------------------------------------------------------------

def my_assignments(db: Session, manager_id: int, status: Optional[ManagerStatus] = None) -> List[PropertyManager]:
     query = (
          db.query(PropertyManager)
          .join(Property, PropertyManager.property_id == Property.id)
          .filter(PropertyManager.manager_id == manager_id, Property.is_deleted.is_(False))
     )
     if status is not None:
          query = query.filter(PropertyManager.status == status)
     return query.order_by(PropertyManager.created_at.desc()).all()


def _own_assignment(db: Session, manager_id: int, assignment_id: int) -> PropertyManager:
     assignment = (
          db.query(PropertyManager)
          .filter(PropertyManager.id == assignment_id, PropertyManager.manager_id == manager_id)
          .first()
     )
     if assignment is None:
          raise NotFoundError.for_entity("Assignment", assignment_id)
     return assignment


def accept_assignment(db: Session, manager_id: int, assignment_id: int) -> PropertyManager:
     assignment = _own_assignment(db, manager_id, assignment_id)
     if assignment.status != ManagerStatus.PENDING:
          raise BusinessRuleError("Only pending invitations can be accepted")
     assignment.status = ManagerStatus.ACTIVE
     db.flush()
     audit_service.record(db, manager_id, "manager.accept", AuditEntityType.MANAGER, assignment.id,
                          metadata={"property_id": assignment.property_id})
     notification_service.notify(
          db, assignment.invited_by, NotificationType.SYSTEM, "Manager invitation accepted",
          f"{assignment.manager.full_name} now manages {assignment.property.name}",
          entity_type=AuditEntityType.PROPERTY, entity_id=assignment.property_id,
     )
     return assignment


def decline_assignment(db: Session, manager_id: int, assignment_id: int) -> PropertyManager:
     assignment = _own_assignment(db, manager_id, assignment_id)
     if assignment.status != ManagerStatus.PENDING:
          raise BusinessRuleError("Only pending invitations can be declined")
     assignment.status = ManagerStatus.REVOKED
     db.flush()
     audit_service.record(db, manager_id, "manager.decline", AuditEntityType.MANAGER, assignment.id)
     return assignment
