# schemas/manager.py
"""
Pydantic schemas for property-manager assignments.

ManagerPermissions is the one and only shape of PropertyManager.permissions:
every write goes through it, so unknown keys never reach the database and
missing keys take the defaults below.
"""
from datetime import datetime
from typing import Optional
from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.enums import ManagerStatus
from .common import CamelModel
from .property import PropertyResponse


class ManagerPermissions(CamelModel):
     can_view_tenants: bool = True
     can_edit_tenants: bool = False
     can_view_payments: bool = True
     can_record_payments: bool = False
     can_view_maintenance: bool = True
     can_manage_maintenance: bool = False
     can_edit_property: bool = False

     model_config = ConfigDict(
          alias_generator=to_camel,
          populate_by_name=True,
          extra="forbid",
     )


class ManagerInvite(CamelModel):
     email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
     first_name: Optional[str] = Field(None, max_length=100)
     last_name: Optional[str] = Field(None, max_length=100)
     phone: Optional[str] = Field(None, max_length=50)
     permissions: ManagerPermissions = Field(default_factory=ManagerPermissions)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "email": "manager@example.rw",
                    "firstName": "Eric",
                    "lastName": "Habimana",
                    "permissions": {"canViewTenants": True, "canRecordPayments": True},
               }
          }
     )


class ManagerUpdate(CamelModel):
     permissions: Optional[ManagerPermissions] = None
     status: Optional[ManagerStatus] = None


class ManagerAssignmentResponse(CamelModel):
     id: int
     property_id: int
     manager_id: int
     invited_by: int
     permissions: ManagerPermissions
     status: ManagerStatus
     created_at: datetime
     updated_at: datetime

     property_name: Optional[str] = None
     manager_name: Optional[str] = None
     manager_email: Optional[str] = None


class ManagedPropertyResponse(PropertyResponse):
     """A property in the manager portal, with what the manager may do there."""
     assignment_id: int
     permissions: ManagerPermissions
