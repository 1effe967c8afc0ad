# schemas/payment.py
"""
Pydantic schemas for rent payments.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import Field, ConfigDict

from models.enums import PaymentMethod
from .common import CamelModel, Money


class PaymentCreate(CamelModel):
     """Request body for POST /payments."""
     tenant_id: int = Field(..., gt=0)
     amount: Money = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount in RWF")
     payment_method: PaymentMethod = PaymentMethod.CASH
     payment_date: date = Field(default_factory=date.today)
     period_month: int = Field(..., ge=1, le=12, description="Rent month being paid (1-12)")
     period_year: int = Field(..., ge=2000, le=2100)
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenantId": 1,
                    "amount": 150000,
                    "paymentMethod": "momo",
                    "paymentDate": "2026-03-02",
                    "periodMonth": 3,
                    "periodYear": 2026,
               }
          }
     )


class PaymentResponse(CamelModel):
     id: int
     tenant_id: int
     unit_id: int
     amount: Money
     payment_method: PaymentMethod
     payment_date: date
     period_month: int
     period_year: int
     notes: Optional[str] = None
     received_by: Optional[int] = None
     performed_by_agent_id: Optional[int] = None
     created_at: datetime

     tenant_name: Optional[str] = None
     unit_number: Optional[str] = None
     property_id: Optional[int] = None
     property_name: Optional[str] = None
     property_address: Optional[str] = None


class TenantBalanceResponse(CamelModel):
     """Outstanding rent for a tenant since the lease started."""
     tenant_id: int
     monthly_rent: Money
     months_elapsed: int
     expected_total: Money
     total_paid: Money
     balance: Money
     months_owed: int
