from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import TenantStatus


class Tenant(Base):
     """
     Tenant model - a person renting (or who rented) a unit.

     `user_id` is the owning landlord; `user_account_id` is the tenant's own
     login, when one exists. Vacated tenants keep their row with unit_id null.
     """
     __tablename__ = "tenants"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True, index=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     user_account_id = Column(
          Integer,
          ForeignKey("users.id", ondelete="SET NULL"),
          nullable=True,
          unique=True,
     )
     performed_by_agent_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

     # Personal info
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     email = Column(String(255), nullable=True)
     phone = Column(String(50), nullable=False)
     national_id = Column(String(50), nullable=True)

     # Emergency contact
     emergency_contact = Column(String(200), nullable=True)
     emergency_phone = Column(String(50), nullable=True)

     # Lease
     status = Column(enum_type(TenantStatus, "tenant_status"), default=TenantStatus.ACTIVE, nullable=False, index=True)
     lease_start_date = Column(Date, nullable=True)
     lease_end_date = Column(Date, nullable=True)
     rent_due_day = Column(Integer, default=1, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     unit = relationship("Unit", back_populates="tenants")
     owner = relationship("User", foreign_keys=[user_id])
     user_account = relationship("User", back_populates="tenant_account", foreign_keys=[user_account_id])
     payments = relationship("Payment", back_populates="tenant", cascade="all, delete-orphan")

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}"

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.first_name} {self.last_name}')>"
