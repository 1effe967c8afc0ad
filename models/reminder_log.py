from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, func
from .base import Base, enum_type
from .enums import ReminderChannel, ReminderTrigger, ReminderStatus


class ReminderLog(Base):
     """ReminderLog model - one attempt to remind a tenant about rent."""
     __tablename__ = "reminder_logs"

     id = Column(Integer, primary_key=True, autoincrement=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
     type = Column(enum_type(ReminderChannel, "reminder_channel"), nullable=False)
     trigger_type = Column(enum_type(ReminderTrigger, "reminder_trigger"), nullable=False)
     status = Column(enum_type(ReminderStatus, "reminder_status"), nullable=False)
     message = Column(Text, nullable=True)
     sent_at = Column(DateTime, server_default=func.now(), nullable=False)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<ReminderLog(id={self.id}, tenant_id={self.tenant_id}, status='{self.status}')>"
