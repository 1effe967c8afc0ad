from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, func
from .base import Base, enum_type
from .enums import NotificationType, NotificationPriority, AuditEntityType


class Notification(Base):
     """
     In-app notification for a single user.

     Written fire-and-forget by services; only the recipient flips `is_read`.
     """
     __tablename__ = "notifications"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     type = Column(enum_type(NotificationType, "notification_type"), nullable=False)
     title = Column(String(255), nullable=False)
     message = Column(Text, nullable=False)
     priority = Column(
          enum_type(NotificationPriority, "notification_priority"),
          default=NotificationPriority.NORMAL,
          nullable=False,
     )
     is_read = Column(Boolean, default=False, nullable=False, index=True)
     read_at = Column(DateTime, nullable=True)
     entity_type = Column(enum_type(AuditEntityType, "notification_entity_type"), nullable=True)
     entity_id = Column(Integer, nullable=True)
     action_url = Column(String(500), nullable=True)
     extra = Column("metadata", JSON, nullable=True)
     expires_at = Column(DateTime, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def mark_read(self) -> None:
          if not self.is_read:
               self.is_read = True
               self.read_at = datetime.utcnow()

     def __repr__(self):
          return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
