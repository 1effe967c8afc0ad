# schemas/property.py
"""
Pydantic schemas for Property API request/response validation.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field, ConfigDict

from models.enums import PropertyType
from .common import CamelModel


class PropertyCreate(CamelModel):
     """Schema for creating a property."""
     name: str = Field(..., min_length=1, max_length=255)
     type: PropertyType = PropertyType.APARTMENT
     address: str = Field(..., min_length=1, max_length=500)
     city: str = Field("Kigali", max_length=100)
     description: Optional[str] = None
     agency_id: Optional[int] = Field(None, gt=0, description="Agency managing the property")
     owner_id: Optional[int] = Field(
          None, gt=0, description="Owning user; only honoured for super admins and agents"
     )

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Kacyiru Heights",
                    "type": "apartment",
                    "address": "KG 7 Ave, Kacyiru",
                    "city": "Kigali",
               }
          }
     )


class PropertyUpdate(CamelModel):
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     type: Optional[PropertyType] = None
     address: Optional[str] = Field(None, min_length=1, max_length=500)
     city: Optional[str] = Field(None, max_length=100)
     description: Optional[str] = None
     is_active: Optional[bool] = None


class PropertyResponse(CamelModel):
     id: int
     user_id: int
     agency_id: Optional[int] = None
     name: str
     type: PropertyType
     address: str
     city: str
     description: Optional[str] = None
     is_active: bool
     is_deleted: bool
     deleted_at: Optional[datetime] = None
     created_at: datetime
     updated_at: datetime

     # Computed by the service
     total_units: int = 0
     occupied_units: int = 0
