from sqlalchemy import Column, Integer, Text, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import CommissionStatus


class AgentCommission(Base):
     """AgentCommission model - money owed to an agent for one transaction."""
     __tablename__ = "agent_commissions"

     id = Column(Integer, primary_key=True, autoincrement=True)
     agent_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     transaction_id = Column(
          Integer,
          ForeignKey("agent_transactions.id", ondelete="NO ACTION"),
          unique=True,
          nullable=False,
     )
     commission_rule_id = Column(Integer, ForeignKey("commission_rules.id", ondelete="SET NULL"), nullable=True)
     amount = Column(Numeric(12, 2), nullable=False)
     status = Column(
          enum_type(CommissionStatus, "commission_status"),
          default=CommissionStatus.PENDING,
          nullable=False,
          index=True,
     )
     paid_at = Column(DateTime, nullable=True)
     paid_by = Column(Integer, ForeignKey("users.id", ondelete="NO ACTION"), nullable=True)
     notes = Column(Text, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     agent = relationship("User", foreign_keys=[agent_id])
     transaction = relationship("AgentTransaction", back_populates="commission")
     rule = relationship("CommissionRule")

     def __repr__(self):
          return (
               f"<AgentCommission(id={self.id}, agent_id={self.agent_id}, "
               f"amount={self.amount}, status='{self.status}')>"
          )
