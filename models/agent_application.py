from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import ApplicationStatus


class AgentApplication(Base):
     """
     AgentApplication model - a public request to join as a field agent.

     Approval provisions a User with role=agent and links it via `user_id`.
     """
     __tablename__ = "agent_applications"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), nullable=False, index=True)
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     phone = Column(String(50), nullable=False)
     national_id = Column(String(50), nullable=True)
     address = Column(String(500), nullable=True)
     city = Column(String(100), nullable=True)
     motivation = Column(Text, nullable=True)
     experience = Column(Text, nullable=True)

     status = Column(
          enum_type(ApplicationStatus, "application_status"),
          default=ApplicationStatus.PENDING,
          nullable=False,
          index=True,
     )
     reviewed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
     reviewed_at = Column(DateTime, nullable=True)
     rejection_reason = Column(Text, nullable=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     reviewer = relationship("User", foreign_keys=[reviewed_by])
     user = relationship("User", foreign_keys=[user_id])

     def __repr__(self):
          return f"<AgentApplication(id={self.id}, email='{self.email}', status='{self.status}')>"
