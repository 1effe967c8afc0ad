"""
AuditLog model - append-only record of state-changing actions.

There is no updated_at column, and the ORM refuses to flush an UPDATE or
DELETE for an existing row: once written, an entry never changes.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, event, func
from .base import Base, enum_type
from .enums import AuditEntityType


class AuditLog(Base):
     __tablename__ = "audit_logs"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
     action = Column(String(100), nullable=False, index=True)
     entity_type = Column(enum_type(AuditEntityType, "audit_entity_type"), nullable=False)
     entity_id = Column(Integer, nullable=True)
     description = Column(Text, nullable=True)
     extra = Column("metadata", JSON, nullable=True)
     ip_address = Column(String(64), nullable=True)
     user_agent = Column(String(500), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

     def __repr__(self):
          return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}:{self.entity_id})>"


class AuditLogImmutableError(RuntimeError):
     pass


@event.listens_for(AuditLog, "before_update")
def _reject_update(mapper, connection, target):
     raise AuditLogImmutableError(f"Audit log {target.id} is append-only")


@event.listens_for(AuditLog, "before_delete")
def _reject_delete(mapper, connection, target):
     raise AuditLogImmutableError(f"Audit log {target.id} is append-only")
