# schemas/maintenance.py
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from models.enums import TicketCategory, TicketPriority, TicketStatus
from .common import CamelModel


class TicketCreate(CamelModel):
     unit_id: int = Field(..., gt=0)
     category: TicketCategory
     description: str = Field(..., min_length=3)
     priority: TicketPriority = TicketPriority.MEDIUM
     attachments: List[str] = Field(default_factory=list, description="Attachment URLs")


class TicketUpdate(CamelModel):
     category: Optional[TicketCategory] = None
     description: Optional[str] = Field(None, min_length=3)
     priority: Optional[TicketPriority] = None
     attachments: Optional[List[str]] = None


class TicketStatusUpdate(CamelModel):
     status: TicketStatus


class TicketAssign(CamelModel):
     assigned_to: Optional[int] = Field(None, gt=0, description="Maintenance user; null unassigns")


class TicketResponse(CamelModel):
     id: int
     unit_id: int
     tenant_id: Optional[int] = None
     assigned_to: Optional[int] = None
     category: TicketCategory
     description: str
     priority: TicketPriority
     status: TicketStatus
     completed_at: Optional[datetime] = None
     attachments: Optional[List[str]] = None
     created_at: datetime
     updated_at: datetime

     unit_number: Optional[str] = None
     property_id: Optional[int] = None
     property_name: Optional[str] = None
     tenant_name: Optional[str] = None
     assignee_name: Optional[str] = None
