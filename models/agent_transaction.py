from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import TargetUserType


class AgentTransaction(Base):
     """
     AgentTransaction model - one action an agent performed for a client.

     Written together with its AgentCommission (if any) in a single database
     transaction by services.commission_service.record_agent_action.
     """
     __tablename__ = "agent_transactions"

     id = Column(Integer, primary_key=True, autoincrement=True)
     agent_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     action_type = Column(String(50), nullable=False, index=True)
     target_user_type = Column(enum_type(TargetUserType, "target_user_type"), nullable=False)
     target_user_id = Column(Integer, nullable=True)
     target_tenant_id = Column(Integer, nullable=True)
     related_entity_type = Column(String(50), nullable=True)
     related_entity_id = Column(Integer, nullable=True)
     description = Column(Text, nullable=True)
     extra = Column("metadata", JSON, nullable=True)
     transaction_amount = Column(Numeric(12, 2), nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     agent = relationship("User", foreign_keys=[agent_id])
     commission = relationship("AgentCommission", back_populates="transaction", uselist=False)

     def __repr__(self):
          return f"<AgentTransaction(id={self.id}, agent_id={self.agent_id}, action='{self.action_type}')>"
