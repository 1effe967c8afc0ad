# services/access_service.py
"""
Role resolver.

Turns an authenticated User into an AccessScope: the set of property ids the
user may see, plus the extra handles some roles need (the tenant row for a
tenant, the per-property permissions for a manager). Every scoped query in
services.scoping starts from one of these.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models import Property, PropertyManager, Tenant, Unit, User
from models.enums import ManagerStatus, UserRole
from schemas.manager import ManagerPermissions
from .permissions import Capability, has_permission, parse_permissions


@dataclass
class AccessScope:
     user_id: int
     role: UserRole
     is_super_admin: bool = False
     # None = unrestricted; an empty set = nothing
     property_ids: Optional[Set[int]] = field(default_factory=set)
     tenant_id: Optional[int] = None
     assignments: Dict[int, ManagerPermissions] = field(default_factory=dict)
     user_permissions: Dict[str, bool] = field(default_factory=dict)

     @property
     def is_unrestricted(self) -> bool:
          return self.property_ids is None

     def can_see_property(self, property_id: Optional[int]) -> bool:
          if self.property_ids is None:
               return True
          return property_id is not None and property_id in self.property_ids

     def permissions_for(self, property_id: int) -> Optional[ManagerPermissions]:
          return self.assignments.get(property_id)

     def has_capability(self, property_id: int, capability: Optional[Capability]) -> bool:
          """Managers need the flag on that property; every other role passes."""
          if self.role != UserRole.MANAGER or capability is None:
               return True
          return has_permission(self.permissions_for(property_id), capability)

     def property_ids_with(self, capability: Optional[Capability]) -> Optional[Set[int]]:
          """The visible property ids, narrowed to those granting `capability` for managers."""
          if self.property_ids is None or self.role != UserRole.MANAGER or capability is None:
               return self.property_ids
          return {pid for pid, perms in self.assignments.items() if has_permission(perms, capability)}


def _owned_property_ids(db: Session, user_id: int) -> Set[int]:
     rows = (
          db.query(Property.id)
          .filter(or_(Property.user_id == user_id, Property.agency_id == user_id))
          .all()
     )
     return {row[0] for row in rows}


def resolve_scope(db: Session, user: User) -> AccessScope:
     """
     Compute what `user` can see.

     - super_admin: everything
     - owner / agency: properties they own or that name them as agency
       (soft-deleted ones included, so their payments stay readable)
     - manager: properties with an *active* assignment; pending and revoked
       assignments grant nothing
     - tenant: the property of the unit their linked tenant row occupies
     - maintenance / agent: no property scope (tickets and agent data are
       scoped by user id instead)
     """
     role = UserRole(user.role)
     scope = AccessScope(user_id=user.id, role=role, user_permissions=dict(user.permissions or {}))

     if role == UserRole.SUPER_ADMIN:
          scope.is_super_admin = True
          scope.property_ids = None
          return scope

     if role in (UserRole.OWNER, UserRole.AGENCY):
          scope.property_ids = _owned_property_ids(db, user.id)
          return scope

     if role == UserRole.MANAGER:
          assignments = (
               db.query(PropertyManager)
               .filter(
                    PropertyManager.manager_id == user.id,
                    PropertyManager.status == ManagerStatus.ACTIVE,
               )
               .all()
          )
          scope.assignments = {a.property_id: parse_permissions(a.permissions) for a in assignments}
          scope.property_ids = set(scope.assignments)
          return scope

     if role == UserRole.TENANT:
          tenant = db.query(Tenant).filter(Tenant.user_account_id == user.id).first()
          if tenant is not None:
               scope.tenant_id = tenant.id
               if tenant.unit_id is not None:
                    property_id = db.query(Unit.property_id).filter(Unit.id == tenant.unit_id).scalar()
                    if property_id is not None:
                         scope.property_ids = {property_id}
          return scope

     # maintenance, agent
     return scope
