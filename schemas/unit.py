# schemas/unit.py
from datetime import datetime
from typing import Optional
from pydantic import Field

from models.enums import UnitStatus
from .common import CamelModel, Money


class UnitCreate(CamelModel):
     property_id: int = Field(..., gt=0)
     unit_number: str = Field(..., min_length=1, max_length=50)
     floor: Optional[int] = None
     bedrooms: int = Field(1, ge=0)
     bathrooms: int = Field(1, ge=0)
     monthly_rent: Money = Field(..., gt=0, max_digits=12, decimal_places=2)
     payment_due_day: int = Field(1, ge=1, le=31)


class UnitUpdate(CamelModel):
     unit_number: Optional[str] = Field(None, min_length=1, max_length=50)
     floor: Optional[int] = None
     bedrooms: Optional[int] = Field(None, ge=0)
     bathrooms: Optional[int] = Field(None, ge=0)
     monthly_rent: Optional[Money] = Field(None, gt=0, max_digits=12, decimal_places=2)
     payment_due_day: Optional[int] = Field(None, ge=1, le=31)
     status: Optional[UnitStatus] = Field(
          None, description="Only 'maintenance' and 'vacant' may be set by hand; occupancy follows tenants"
     )


class UnitResponse(CamelModel):
     id: int
     property_id: int
     unit_number: str
     floor: Optional[int] = None
     bedrooms: int
     bathrooms: int
     monthly_rent: Money
     payment_due_day: int
     status: UnitStatus
     created_at: datetime
     updated_at: datetime

     property_name: Optional[str] = None
     current_tenant_id: Optional[int] = None
     current_tenant_name: Optional[str] = None
