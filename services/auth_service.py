# services/auth_service.py
"""
Password hashing, token minting and self-service account management.
"""
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET
from models import Tenant, User
from models.enums import AuditEntityType, UserRole
from logging_config import logger
from . import audit_service
from .exceptions import BusinessRuleError, ConflictError, ServiceError

# Bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthenticationError(ServiceError):
     status_code = 401


def hash_password(password: str) -> str:
     return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
     return pwd_context.verify(password, hashed)


def generate_temp_password() -> str:
     return secrets.token_hex(8)


def create_access_token(user: User, expires_minutes: Optional[int] = None) -> str:
     expire = datetime.utcnow() + timedelta(minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES)
     payload = {
          "id": user.id,
          "role": UserRole(user.role).value,
          "email": user.email,
          "exp": expire,
     }
     return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
     """Raises jose.JWTError (incl. ExpiredSignatureError) on a bad token."""
     return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])


def get_user_by_email(db: Session, email: str) -> Optional[User]:
     return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def create_user(
     db: Session,
     email: str,
     password: str,
     role: UserRole,
     first_name: Optional[str] = None,
     last_name: Optional[str] = None,
     phone: Optional[str] = None,
     national_id: Optional[str] = None,
) -> User:
     if get_user_by_email(db, email):
          raise ConflictError("A user with this email already exists")
     user = User(
          email=email.strip().lower(),
          password=hash_password(password),
          role=role,
          first_name=first_name,
          last_name=last_name,
          phone=phone,
          national_id=national_id,
          is_active=True,
     )
     db.add(user)
     try:
          db.flush()
     except IntegrityError:
          # Lost a race with a concurrent signup for the same address
          db.rollback()
          raise ConflictError("A user with this email already exists")
     return user


def _link_tenant_record(db: Session, user: User) -> None:
     """Attach the new login to a tenant record created earlier with the same email."""
     tenant = (
          db.query(Tenant)
          .filter(func.lower(Tenant.email) == user.email, Tenant.user_account_id.is_(None))
          .order_by(Tenant.created_at.desc())
          .first()
     )
     if tenant is not None:
          tenant.user_account_id = user.id
          db.flush()


def register(db: Session, data) -> User:
     role = UserRole(data.role)
     if role not in (UserRole.OWNER, UserRole.AGENCY, UserRole.TENANT):
          raise BusinessRuleError("This role cannot be self-registered")
     user = create_user(
          db,
          email=data.email,
          password=data.password,
          role=role,
          first_name=data.first_name,
          last_name=data.last_name,
          phone=data.phone,
     )
     if role == UserRole.TENANT:
          _link_tenant_record(db, user)
     logger.info("Registered user %s (%s)", user.id, role.value)
     return user


def authenticate(db: Session, email: str, password: str) -> User:
     user = get_user_by_email(db, email)
     if user is None or not verify_password(password, user.password):
          raise AuthenticationError("Invalid email or password")
     if not user.is_active:
          raise AuthenticationError("Account is deactivated")
     return user


def update_profile(db: Session, user: User, changes: Dict[str, Any]) -> User:
     """Apply self-service profile edits. A super admin's national ID is not editable here."""
     if user.role == UserRole.SUPER_ADMIN:
          changes.pop("national_id", None)
     for key, value in changes.items():
          setattr(user, key, value)
     db.flush()
     audit_service.record(db, user.id, "user.update_profile", AuditEntityType.USER, user.id,
                          metadata={"fields": sorted(changes)})
     return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
     if not verify_password(current_password, user.password):
          raise BusinessRuleError("Current password is incorrect")
     user.password = hash_password(new_password)
     db.flush()
     audit_service.record(db, user.id, "user.change_password", AuditEntityType.USER, user.id)
     logger.info("User %s changed their password", user.id)
