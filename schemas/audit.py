# schemas/audit.py
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import AliasChoices, Field

from models.enums import AuditEntityType
from .common import CamelModel


class AuditLogResponse(CamelModel):
     id: int
     user_id: Optional[int] = None
     action: str
     entity_type: AuditEntityType
     entity_id: Optional[int] = None
     description: Optional[str] = None
     extra: Optional[Dict[str, Any]] = Field(
          None,
          validation_alias=AliasChoices("extra", "metadata"),
          serialization_alias="metadata",
     )
     ip_address: Optional[str] = None
     user_agent: Optional[str] = None
     created_at: datetime
