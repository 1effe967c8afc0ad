from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import PropertyType


class Property(Base):
     """
     Property model - a building or house owned by a User.

     Properties are soft deleted: `is_deleted` hides them from default queries
     while payments and tenants that reference them keep resolving.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     agency_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
     performed_by_agent_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

     name = Column(String(255), nullable=False)
     type = Column(enum_type(PropertyType, "property_type"), default=PropertyType.APARTMENT, nullable=False)
     address = Column(String(500), nullable=False)
     city = Column(String(100), default="Kigali", nullable=False)
     description = Column(Text, nullable=True)
     is_active = Column(Boolean, default=True, nullable=False)

     # Soft delete
     is_deleted = Column(Boolean, default=False, nullable=False, index=True)
     deleted_at = Column(DateTime, nullable=True)
     deleted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     owner = relationship("User", back_populates="properties", foreign_keys=[user_id])
     units = relationship("Unit", back_populates="property", cascade="all, delete-orphan")
     managers = relationship("PropertyManager", back_populates="property", cascade="all, delete-orphan")

     def soft_delete(self, deleted_by: int) -> None:
          """Hide the property from default queries, keeping it for history."""
          self.is_deleted = True
          self.deleted_at = datetime.utcnow()
          self.deleted_by = deleted_by

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}')>"
