from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, DateTime, ForeignKey, func
from .base import Base, enum_type
from .enums import CommissionType


class CommissionRule(Base):
     """
     CommissionRule model - how much an agent earns for one action type.

     At most one rule exists per action type. `commission_value` is a
     percentage (0-100) or a fixed RWF amount depending on `commission_type`;
     `min_amount`/`max_amount` clamp the computed value.
     """
     __tablename__ = "commission_rules"

     id = Column(Integer, primary_key=True, autoincrement=True)
     action_type = Column(String(50), unique=True, nullable=False)
     name = Column(String(255), nullable=False)
     description = Column(Text, nullable=True)
     commission_type = Column(enum_type(CommissionType, "commission_type"), nullable=False)
     commission_value = Column(Numeric(12, 2), nullable=False)
     min_amount = Column(Numeric(12, 2), nullable=True)
     max_amount = Column(Numeric(12, 2), nullable=True)
     is_active = Column(Boolean, default=True, nullable=False)
     created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return (
               f"<CommissionRule(id={self.id}, action_type='{self.action_type}', "
               f"type='{self.commission_type}', value={self.commission_value})>"
          )
