# schemas/auth.py
"""
Pydantic schemas for registration, login and the current-user payload.
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import Field, ConfigDict

from models.enums import UserRole
from .common import CamelModel


class RegisterRequest(CamelModel):
     """Self-service signup; staff roles are provisioned by invitation or approval."""
     email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
     password: str = Field(..., min_length=6, max_length=128)
     first_name: str = Field(..., min_length=1, max_length=100)
     last_name: str = Field(..., min_length=1, max_length=100)
     phone: Optional[str] = Field(None, max_length=50)
     role: Literal["owner", "agency", "tenant"] = "owner"

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "email": "jean@example.rw",
                    "password": "secret123",
                    "firstName": "Jean",
                    "lastName": "Mugisha",
                    "phone": "+250788000000",
                    "role": "owner",
               }
          }
     )


class LoginRequest(CamelModel):
     email: str = Field(..., min_length=3, max_length=255)
     password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
     id: int
     email: str
     first_name: Optional[str] = None
     last_name: Optional[str] = None
     phone: Optional[str] = None
     national_id: Optional[str] = None
     role: UserRole
     is_active: bool
     created_at: Optional[datetime] = None


class ProfileUpdate(CamelModel):
     """Fields a user may change on their own account; omitted fields are left alone."""
     first_name: Optional[str] = Field(None, min_length=1, max_length=100)
     last_name: Optional[str] = Field(None, min_length=1, max_length=100)
     phone: Optional[str] = Field(None, max_length=50)
     national_id: Optional[str] = Field(None, max_length=50)


class PasswordChange(CamelModel):
     current_password: str = Field(..., min_length=1)
     new_password: str = Field(..., min_length=6, max_length=128)


class TokenResponse(CamelModel):
     token: str
     user: UserResponse
