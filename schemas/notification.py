# schemas/notification.py
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import AliasChoices, Field

from models.enums import (
     AuditEntityType,
     NotificationPriority,
     NotificationType,
     ReminderChannel,
     ReminderStatus,
     ReminderTrigger,
)
from .common import CamelModel


class NotificationResponse(CamelModel):
     id: int
     user_id: int
     type: NotificationType
     title: str
     message: str
     priority: NotificationPriority
     is_read: bool
     read_at: Optional[datetime] = None
     entity_type: Optional[AuditEntityType] = None
     entity_id: Optional[int] = None
     action_url: Optional[str] = None
     extra: Optional[Dict[str, Any]] = Field(
          None,
          validation_alias=AliasChoices("extra", "metadata"),
          serialization_alias="metadata",
     )
     expires_at: Optional[datetime] = None
     created_at: datetime


class UnreadCountResponse(CamelModel):
     count: int


class MarkAllReadResponse(CamelModel):
     updated: int


class ReminderRequest(CamelModel):
     message: Optional[str] = Field(None, description="Overrides the default reminder text")


class ReminderLogResponse(CamelModel):
     id: int
     tenant_id: int
     type: ReminderChannel
     trigger_type: ReminderTrigger
     status: ReminderStatus
     message: Optional[str] = None
     sent_at: datetime
