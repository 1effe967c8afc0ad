"""
PropertyManager model - assignment of a manager User to a Property.

The `permissions` column is JSON on disk, but it is only ever written through
`schemas.manager.ManagerPermissions`, so the stored shape is always the fixed
seven-flag record.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import ManagerStatus


class PropertyManager(Base):
     __tablename__ = "property_managers"
     __table_args__ = (
          UniqueConstraint("property_id", "manager_id", name="property_manager_unique"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
     manager_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     invited_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
     permissions = Column(JSON, nullable=False)
     status = Column(enum_type(ManagerStatus, "manager_status"), default=ManagerStatus.PENDING, nullable=False)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     @property
     def is_active(self) -> bool:
          return self.status == ManagerStatus.ACTIVE

     # Relationships (after is_active: `property` shadows the builtin from here on)
     property = relationship("Property", back_populates="managers")
     manager = relationship("User", foreign_keys=[manager_id])
     inviter = relationship("User", foreign_keys=[invited_by])

     def __repr__(self):
          return (
               f"<PropertyManager(id={self.id}, property_id={self.property_id}, "
               f"manager_id={self.manager_id}, status='{self.status}')>"
          )
