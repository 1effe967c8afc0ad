# schemas/tenant.py
"""
Pydantic schemas for Tenant API request/response validation.

Unit assignment is not part of TenantUpdate: moving a tenant between units goes
through the dedicated assign/unassign endpoints so occupancy stays consistent.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import Field, ConfigDict, model_validator

from models.enums import TenantStatus
from .common import CamelModel


class TenantCreate(CamelModel):
     first_name: str = Field(..., min_length=1, max_length=100)
     last_name: str = Field(..., min_length=1, max_length=100)
     email: Optional[str] = Field(None, max_length=255)
     phone: str = Field(..., min_length=3, max_length=50)
     national_id: Optional[str] = Field(None, max_length=50)
     emergency_contact: Optional[str] = Field(None, max_length=200)
     emergency_phone: Optional[str] = Field(None, max_length=50)
     unit_id: Optional[int] = Field(None, gt=0, description="Vacant unit to move the tenant into")
     lease_start_date: Optional[date] = None
     lease_end_date: Optional[date] = None
     rent_due_day: int = Field(1, ge=1, le=31)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "firstName": "Aline",
                    "lastName": "Uwase",
                    "phone": "+250788123456",
                    "unitId": 3,
                    "leaseStartDate": "2026-01-01",
               }
          }
     )

     @model_validator(mode="after")
     def check_lease_dates(self):
          if self.lease_start_date and self.lease_end_date and self.lease_end_date < self.lease_start_date:
               raise ValueError("leaseEndDate must be on or after leaseStartDate")
          return self


class TenantUpdate(CamelModel):
     first_name: Optional[str] = Field(None, min_length=1, max_length=100)
     last_name: Optional[str] = Field(None, min_length=1, max_length=100)
     email: Optional[str] = Field(None, max_length=255)
     phone: Optional[str] = Field(None, min_length=3, max_length=50)
     national_id: Optional[str] = Field(None, max_length=50)
     emergency_contact: Optional[str] = Field(None, max_length=200)
     emergency_phone: Optional[str] = Field(None, max_length=50)
     status: Optional[TenantStatus] = None
     lease_start_date: Optional[date] = None
     lease_end_date: Optional[date] = None
     rent_due_day: Optional[int] = Field(None, ge=1, le=31)


class TenantAssign(CamelModel):
     unit_id: int = Field(..., gt=0)
     lease_start_date: Optional[date] = None
     lease_end_date: Optional[date] = None


class TenantResponse(CamelModel):
     id: int
     user_id: int
     unit_id: Optional[int] = None
     user_account_id: Optional[int] = None
     first_name: str
     last_name: str
     email: Optional[str] = None
     phone: str
     national_id: Optional[str] = None
     emergency_contact: Optional[str] = None
     emergency_phone: Optional[str] = None
     status: TenantStatus
     lease_start_date: Optional[date] = None
     lease_end_date: Optional[date] = None
     rent_due_day: int
     created_at: datetime
     updated_at: datetime

     unit_number: Optional[str] = None
     property_id: Optional[int] = None
     property_name: Optional[str] = None
