from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import UnitStatus


class Unit(Base):
     """
     Unit model - individual rentable units within a property.

     `status` mirrors occupancy: it is only changed together with the tenant
     assignment (see services.tenant_service).
     """
     __tablename__ = "units"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)

     unit_number = Column(String(50), nullable=False)
     floor = Column(Integer, nullable=True)
     bedrooms = Column(Integer, default=1, nullable=False)
     bathrooms = Column(Integer, default=1, nullable=False)
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     payment_due_day = Column(Integer, default=1, nullable=False)
     status = Column(enum_type(UnitStatus, "unit_status"), default=UnitStatus.VACANT, nullable=False, index=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     property = relationship("Property", back_populates="units")
     # No delete cascade: removing a unit nulls Tenant.unit_id (tenant history survives)
     tenants = relationship("Tenant", back_populates="unit")
     payments = relationship("Payment", back_populates="unit", cascade="all, delete-orphan")
     tickets = relationship("MaintenanceTicket", back_populates="unit", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Unit(id={self.id}, unit_number='{self.unit_number}', status='{self.status}')>"
