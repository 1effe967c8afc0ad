from sqlalchemy import (
     Column, Integer, Numeric, Text, Date, DateTime, ForeignKey, CheckConstraint, func
)
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import PaymentMethod


class Payment(Base):
     """
     Payment model - rent received from a tenant.

     `period_month`/`period_year` identify the rent period the payment
     discharges; `payment_date` is when the money actually changed hands.
     """
     __tablename__ = "payments"
     __table_args__ = (
          CheckConstraint("period_month >= 1 AND period_month <= 12", name="ck_payments_period_month"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
     unit_id = Column(Integer, ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)

     amount = Column(Numeric(12, 2), nullable=False)
     payment_method = Column(enum_type(PaymentMethod, "payment_method"), default=PaymentMethod.CASH, nullable=False)
     payment_date = Column(Date, nullable=False)
     period_month = Column(Integer, nullable=False)
     period_year = Column(Integer, nullable=False)
     notes = Column(Text, nullable=True)

     received_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
     performed_by_agent_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     tenant = relationship("Tenant", back_populates="payments")
     unit = relationship("Unit", back_populates="payments")

     def __repr__(self):
          return (
               f"<Payment(id={self.id}, amount={self.amount}, "
               f"period={self.period_year}-{self.period_month:02d})>"
          )
