# schemas/commission.py
"""
Pydantic schemas for commission rules, agent transactions and commissions.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, Field, ConfigDict, model_validator

from models.enums import AgentActionType, CommissionStatus, CommissionType, TargetUserType
from .common import CamelModel, Money


class CommissionRuleCreate(CamelModel):
     action_type: AgentActionType
     name: str = Field(..., min_length=1, max_length=255)
     description: Optional[str] = None
     commission_type: CommissionType
     commission_value: Money = Field(..., ge=0, max_digits=12, decimal_places=2)
     min_amount: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)
     max_amount: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)
     is_active: bool = True

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "actionType": "record_payment",
                    "name": "Payment collection",
                    "commissionType": "percentage",
                    "commissionValue": 10,
                    "minAmount": 500,
                    "maxAmount": 5000,
               }
          }
     )

     @model_validator(mode="after")
     def check_percentage(self):
          if self.commission_type == CommissionType.PERCENTAGE and self.commission_value > Decimal("100"):
               raise ValueError("percentage commissionValue cannot exceed 100")
          return self


class CommissionRuleUpdate(CamelModel):
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     description: Optional[str] = None
     commission_type: Optional[CommissionType] = None
     commission_value: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)
     min_amount: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)
     max_amount: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)
     is_active: Optional[bool] = None


class CommissionRuleResponse(CamelModel):
     id: int
     action_type: str
     name: str
     description: Optional[str] = None
     commission_type: CommissionType
     commission_value: Money
     min_amount: Optional[Money] = None
     max_amount: Optional[Money] = None
     is_active: bool
     created_by: Optional[int] = None
     created_at: datetime
     updated_at: datetime


class ActionTypeResponse(CamelModel):
     value: str
     label: str
     rule: Optional[CommissionRuleResponse] = None


class RecordActionRequest(CamelModel):
     """An agent reporting an action performed on behalf of a client."""
     action_type: AgentActionType
     target_user_type: TargetUserType
     target_user_id: Optional[int] = Field(None, gt=0)
     target_tenant_id: Optional[int] = Field(None, gt=0)
     related_entity_type: Optional[str] = Field(None, max_length=50)
     related_entity_id: Optional[int] = None
     description: Optional[str] = None
     transaction_amount: Optional[Money] = Field(None, ge=0, max_digits=12, decimal_places=2)
     extra: Optional[Dict[str, Any]] = Field(
          None,
          validation_alias=AliasChoices("metadata", "extra"),
          serialization_alias="metadata",
     )


class AgentTransactionResponse(CamelModel):
     id: int
     agent_id: int
     action_type: str
     target_user_type: TargetUserType
     target_user_id: Optional[int] = None
     target_tenant_id: Optional[int] = None
     related_entity_type: Optional[str] = None
     related_entity_id: Optional[int] = None
     description: Optional[str] = None
     extra: Optional[Dict[str, Any]] = Field(
          None,
          validation_alias=AliasChoices("extra", "metadata"),
          serialization_alias="metadata",
     )
     transaction_amount: Optional[Money] = None
     created_at: datetime

     commission_amount: Optional[Money] = None
     commission_status: Optional[CommissionStatus] = None


class AgentCommissionResponse(CamelModel):
     id: int
     agent_id: int
     transaction_id: int
     commission_rule_id: Optional[int] = None
     amount: Money
     status: CommissionStatus
     paid_at: Optional[datetime] = None
     paid_by: Optional[int] = None
     notes: Optional[str] = None
     created_at: datetime

     agent_name: Optional[str] = None
     action_type: Optional[str] = None
     transaction_description: Optional[str] = None


class RecordActionResponse(CamelModel):
     transaction: AgentTransactionResponse
     commission: Optional[AgentCommissionResponse] = None


class CommissionPayRequest(CamelModel):
     notes: Optional[str] = None


class CommissionBulkPayRequest(CamelModel):
     commission_ids: List[int] = Field(..., min_length=1)
     notes: Optional[str] = None


class CommissionCancelRequest(CamelModel):
     reason: Optional[str] = None


class BulkPayResult(CamelModel):
     paid_count: int
     total_amount: Money
     skipped_ids: List[int] = Field(default_factory=list)


class AgentEarnings(CamelModel):
     total_earned: Money
     pending_amount: Money
     paid_amount: Money
     cancelled_amount: Money
     transaction_count: int
     commission_count: int
     this_month_earned: Money


class CommissionReportRow(CamelModel):
     key: str
     label: str
     commission_count: int
     total_amount: Money
     pending_amount: Money
     paid_amount: Money


class CommissionReport(CamelModel):
     by_agent: List[CommissionReportRow]
     by_action_type: List[CommissionReportRow]
     total_amount: Money
     pending_amount: Money
     paid_amount: Money


class AgentDashboard(CamelModel):
     earnings: AgentEarnings
     recent_transactions: List[AgentTransactionResponse]
