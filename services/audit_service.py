# services/audit_service.py
"""
Audit trail.

`record` appends an AuditLog row on the caller's session. Rows are never
updated or deleted (see models.audit_log).
"""
from contextvars import ContextVar, Token
from typing import Any, Dict, Optional, Tuple

from fastapi import Request
from sqlalchemy import desc
from sqlalchemy.orm import Session

from models import AuditLog
from models.enums import AuditEntityType

# (ip address, user agent) of the request being served, if any
_request_origin: ContextVar[Tuple[Optional[str], Optional[str]]] = ContextVar("request_origin", default=(None, None))


def bind_request(request: Request) -> Token:
     """Stamp rows recorded while serving `request` with its client address and user agent."""
     ip_address = request.client.host if request.client else None
     user_agent = (request.headers.get("user-agent") or "")[:500] or None
     return _request_origin.set((ip_address, user_agent))


def unbind_request(token: Token) -> None:
     _request_origin.reset(token)


def record(
     db: Session,
     user_id: Optional[int],
     action: str,
     entity_type: AuditEntityType,
     entity_id: Optional[int] = None,
     description: Optional[str] = None,
     metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
     ip_address, user_agent = _request_origin.get()
     entry = AuditLog(
          user_id=user_id,
          action=action,
          entity_type=entity_type,
          entity_id=entity_id,
          description=description,
          extra=metadata,
          ip_address=ip_address,
          user_agent=user_agent,
     )
     db.add(entry)
     return entry


def logs_query(
     db: Session,
     user_id: Optional[int] = None,
     entity_type: Optional[AuditEntityType] = None,
     entity_id: Optional[int] = None,
     action: Optional[str] = None,
):
     query = db.query(AuditLog)
     if user_id is not None:
          query = query.filter(AuditLog.user_id == user_id)
     if entity_type is not None:
          query = query.filter(AuditLog.entity_type == entity_type)
     if entity_id is not None:
          query = query.filter(AuditLog.entity_id == entity_id)
     if action:
          query = query.filter(AuditLog.action == action)
     return query.order_by(desc(AuditLog.created_at), desc(AuditLog.id))
