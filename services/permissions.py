# services/permissions.py
"""
Manager capability model.

A manager's rights on one property are the seven flags of
schemas.manager.ManagerPermissions; a Capability names one of them.
"""
import enum
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from schemas.manager import ManagerPermissions
from logging_config import logger


class Capability(str, enum.Enum):
     VIEW_TENANTS = "can_view_tenants"
     EDIT_TENANTS = "can_edit_tenants"
     VIEW_PAYMENTS = "can_view_payments"
     RECORD_PAYMENTS = "can_record_payments"
     VIEW_MAINTENANCE = "can_view_maintenance"
     MANAGE_MAINTENANCE = "can_manage_maintenance"
     EDIT_PROPERTY = "can_edit_property"


DEFAULT_MANAGER_PERMISSIONS = ManagerPermissions()


def parse_permissions(raw: Optional[Union[Mapping[str, Any], ManagerPermissions]]) -> ManagerPermissions:
     """
     Validate a stored permissions blob.

     A row that somehow fails validation grants only the defaults rather than
     whatever keys it happens to contain.
     """
     if isinstance(raw, ManagerPermissions):
          return raw
     if not raw:
          return DEFAULT_MANAGER_PERMISSIONS.model_copy()
     try:
          return ManagerPermissions.model_validate(raw)
     except ValidationError:
          logger.warning("Invalid stored manager permissions %r, falling back to defaults", raw)
          return DEFAULT_MANAGER_PERMISSIONS.model_copy()


def has_permission(assignment: Optional[ManagerPermissions], capability: Capability) -> bool:
     if assignment is None:
          return False
     return bool(getattr(assignment, capability.value))
