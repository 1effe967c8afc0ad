from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, func
from sqlalchemy.orm import relationship
from .base import Base, enum_type
from .enums import UserRole


class User(Base):
     """
     User model - central authentication table.

     Every person who can log in has exactly one role. The optional
     `permissions` map only carries fine-grained admin capabilities
     (e.g. {"manage_commissions": true}) and is read by the policy module.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     password = Column(String(255), nullable=False)
     first_name = Column(String(100), nullable=True)
     last_name = Column(String(100), nullable=True)
     phone = Column(String(50), nullable=True)
     national_id = Column(String(50), nullable=True)
     role = Column(enum_type(UserRole, "user_role"), default=UserRole.OWNER, nullable=False)
     is_active = Column(Boolean, default=True, nullable=False)
     permissions = Column(JSON, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     properties = relationship(
          "Property",
          back_populates="owner",
          foreign_keys="Property.user_id",
          cascade="all, delete-orphan",
     )
     tenant_account = relationship(
          "Tenant",
          back_populates="user_account",
          foreign_keys="Tenant.user_account_id",
          uselist=False,
     )

     @property
     def full_name(self) -> str:
          name = f"{self.first_name or ''} {self.last_name or ''}".strip()
          return name or self.email

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
