from datetime import datetime

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import TicketCategory, TicketPriority, TicketStatus


# Allowed status moves; completed and cancelled are terminal.
TICKET_TRANSITIONS = {
     TicketStatus.PENDING: {TicketStatus.IN_PROGRESS, TicketStatus.CANCELLED},
     TicketStatus.IN_PROGRESS: {TicketStatus.COMPLETED, TicketStatus.CANCELLED},
     TicketStatus.COMPLETED: set(),
     TicketStatus.CANCELLED: set(),
}


class MaintenanceTicket(Base):
     """
     Maintenance ticket raised against a unit.

     Priority is informational only; nothing schedules on it.
     """
     __tablename__ = "maintenance_tickets"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True)
     assigned_to = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

     category = Column(enum_type(TicketCategory, "ticket_category"), nullable=False)
     description = Column(Text, nullable=False)
     priority = Column(enum_type(TicketPriority, "ticket_priority"), default=TicketPriority.MEDIUM, nullable=False)
     status = Column(enum_type(TicketStatus, "ticket_status"), default=TicketStatus.PENDING, nullable=False, index=True)
     completed_at = Column(DateTime, nullable=True)
     attachments = Column(JSON, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     unit = relationship("Unit", back_populates="tickets")
     tenant = relationship("Tenant")
     assignee = relationship("User", foreign_keys=[assigned_to])

     def can_transition_to(self, status: TicketStatus) -> bool:
          return status in TICKET_TRANSITIONS[TicketStatus(self.status)]

     def transition_to(self, status: TicketStatus) -> None:
          """Move the ticket; callers check `can_transition_to` first."""
          self.status = status
          if status == TicketStatus.COMPLETED:
               self.completed_at = datetime.utcnow()

     def __repr__(self):
          return f"<MaintenanceTicket(id={self.id}, unit_id={self.unit_id}, status='{self.status}')>"
