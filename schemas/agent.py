# schemas/agent.py
"""
Pydantic schemas for agent applications and the agent portal.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from models.enums import ApplicationStatus
from .common import CamelModel
from .commission import AgentCommissionResponse, AgentTransactionResponse
from .property import PropertyCreate, PropertyResponse
from .payment import PaymentCreate, PaymentResponse


class AgentApplicationCreate(CamelModel):
     email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
     first_name: str = Field(..., min_length=1, max_length=100)
     last_name: str = Field(..., min_length=1, max_length=100)
     phone: str = Field(..., min_length=3, max_length=50)
     national_id: Optional[str] = Field(None, max_length=50)
     address: Optional[str] = Field(None, max_length=500)
     city: Optional[str] = Field(None, max_length=100)
     motivation: Optional[str] = None
     experience: Optional[str] = None


class AgentApplicationResponse(CamelModel):
     id: int
     email: str
     first_name: str
     last_name: str
     phone: str
     national_id: Optional[str] = None
     address: Optional[str] = None
     city: Optional[str] = None
     motivation: Optional[str] = None
     experience: Optional[str] = None
     status: ApplicationStatus
     reviewed_by: Optional[int] = None
     reviewed_at: Optional[datetime] = None
     rejection_reason: Optional[str] = None
     user_id: Optional[int] = None
     created_at: datetime


class ApplicationStatusResponse(CamelModel):
     email: str
     status: ApplicationStatus
     created_at: datetime
     reviewed_at: Optional[datetime] = None
     rejection_reason: Optional[str] = None


class ApplicationRejectRequest(CamelModel):
     reason: str = Field(..., min_length=1)


class ApplicationApprovalResponse(CamelModel):
     application: AgentApplicationResponse
     user_id: int
     temporary_password: str


class AssistedPaymentRequest(PaymentCreate):
     """Payment recorded by an agent on a tenant's behalf."""


class AssistedPropertyRequest(PropertyCreate):
     owner_id: int = Field(..., gt=0, description="Owner the property is registered for")


class AssistedPaymentResponse(CamelModel):
     payment: PaymentResponse
     transaction: AgentTransactionResponse
     commission: Optional[AgentCommissionResponse] = None


class AssistedPropertyResponse(CamelModel):
     property: PropertyResponse
     transaction: AgentTransactionResponse
     commission: Optional[AgentCommissionResponse] = None
