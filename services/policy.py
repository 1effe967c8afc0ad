# services/policy.py
"""
Role-level authorization policy.

`authorize(role, resource, action)` is the single table deciding which roles
may touch which resource. Whether the caller may touch a *particular* row is
decided afterwards by the role's scope (services.access_service), and for
managers by the capability in MANAGER_CAPABILITIES.
"""
import enum
from typing import Mapping, Optional

from models.enums import UserRole
from .permissions import Capability


class Resource(str, enum.Enum):
     PROPERTY = "property"
     UNIT = "unit"
     TENANT = "tenant"
     PAYMENT = "payment"
     MAINTENANCE = "maintenance"
     MANAGER = "manager"
     DOCUMENT = "document"
     COMMISSION = "commission"
     COMMISSION_RULE = "commission_rule"
     AGENT_PORTAL = "agent_portal"
     AGENT_APPLICATION = "agent_application"
     AUDIT = "audit"
     REPORT = "report"


class Action(str, enum.Enum):
     READ = "read"
     CREATE = "create"
     UPDATE = "update"
     DELETE = "delete"
     SIGN = "sign"
     MANAGE = "manage"


R, C, U, D = Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE
ALL = frozenset(Action)

POLICY = {
     UserRole.SUPER_ADMIN: {resource: ALL for resource in Resource if resource != Resource.AGENT_PORTAL},
     UserRole.OWNER: {
          Resource.PROPERTY: {R, C, U, D},
          Resource.UNIT: {R, C, U, D},
          Resource.TENANT: {R, C, U, D},
          Resource.PAYMENT: {R, C, D},
          Resource.MAINTENANCE: {R, C, U, D},
          Resource.MANAGER: {R, C, U, D},
          Resource.DOCUMENT: {R, C, U, D},
          Resource.AUDIT: {R},
          Resource.REPORT: {R},
     },
     UserRole.AGENCY: {
          Resource.PROPERTY: {R, C, U, D},
          Resource.UNIT: {R, C, U, D},
          Resource.TENANT: {R, C, U, D},
          Resource.PAYMENT: {R, C, D},
          Resource.MAINTENANCE: {R, C, U, D},
          Resource.MANAGER: {R, C, U, D},
          Resource.DOCUMENT: {R, C, U, D},
          Resource.AUDIT: {R},
          Resource.REPORT: {R},
     },
     UserRole.MANAGER: {
          Resource.PROPERTY: {R, U},
          Resource.UNIT: {R, C, U, D},
          Resource.TENANT: {R, C, U, D},
          Resource.PAYMENT: {R, C, D},
          Resource.MAINTENANCE: {R, C, U, D},
          Resource.DOCUMENT: {R, C, U},
          Resource.AUDIT: {R},
          Resource.REPORT: {R},
     },
     UserRole.TENANT: {
          Resource.PROPERTY: {R},
          Resource.UNIT: {R},
          Resource.TENANT: {R},
          Resource.PAYMENT: {R},
          Resource.MAINTENANCE: {R, C},
          Resource.DOCUMENT: {R, Action.SIGN},
          Resource.AUDIT: {R},
     },
     UserRole.MAINTENANCE: {
          Resource.MAINTENANCE: {R, U},
          Resource.AUDIT: {R},
     },
     UserRole.AGENT: {
          Resource.AGENT_PORTAL: {R, C},
          Resource.AUDIT: {R},
     },
}

# Which manager flag each (resource, action) needs on the target property.
MANAGER_CAPABILITIES = {
     (Resource.TENANT, R): Capability.VIEW_TENANTS,
     (Resource.TENANT, C): Capability.EDIT_TENANTS,
     (Resource.TENANT, U): Capability.EDIT_TENANTS,
     (Resource.TENANT, D): Capability.EDIT_TENANTS,
     (Resource.PAYMENT, R): Capability.VIEW_PAYMENTS,
     (Resource.PAYMENT, C): Capability.RECORD_PAYMENTS,
     (Resource.PAYMENT, D): Capability.RECORD_PAYMENTS,
     (Resource.MAINTENANCE, R): Capability.VIEW_MAINTENANCE,
     (Resource.MAINTENANCE, C): Capability.MANAGE_MAINTENANCE,
     (Resource.MAINTENANCE, U): Capability.MANAGE_MAINTENANCE,
     (Resource.MAINTENANCE, D): Capability.MANAGE_MAINTENANCE,
     (Resource.PROPERTY, U): Capability.EDIT_PROPERTY,
     (Resource.UNIT, C): Capability.EDIT_PROPERTY,
     (Resource.UNIT, U): Capability.EDIT_PROPERTY,
     (Resource.UNIT, D): Capability.EDIT_PROPERTY,
}

# Super-admin resources a non-super-admin can be granted through User.permissions.
ADMIN_GRANTS = {
     Resource.COMMISSION: "manage_commissions",
     Resource.COMMISSION_RULE: "manage_commissions",
     Resource.AGENT_APPLICATION: "manage_agents",
}


def authorize(
     role: UserRole,
     resource: Resource,
     action: Action,
     user_permissions: Optional[Mapping[str, bool]] = None,
) -> bool:
     """
     True when `role` may perform `action` on `resource` at all.

     `user_permissions` is the fine-grained admin map stored on the user; it
     can only open the admin-only resources listed in ADMIN_GRANTS.
     """
     allowed = POLICY.get(UserRole(role), {}).get(resource, frozenset())
     if action in allowed:
          return True
     grant = ADMIN_GRANTS.get(resource)
     return bool(grant and user_permissions and user_permissions.get(grant))


def required_capability(resource: Resource, action: Action) -> Optional[Capability]:
     return MANAGER_CAPABILITIES.get((resource, action))
