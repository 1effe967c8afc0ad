# routers/auth.py
"""
Authentication routes: self-service signup, login and the current user's
account (profile edits and password change).
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import User
from schemas.auth import LoginRequest, PasswordChange, ProfileUpdate, RegisterRequest, TokenResponse, UserResponse
from schemas.common import ApiResponse, MessageResponse
from services import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _build_token_response(user: User) -> TokenResponse:
     return TokenResponse(token=auth_service.create_access_token(user), user=UserResponse.model_validate(user))


@router.post(
     "/register",
     response_model=ApiResponse[TokenResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Register an owner, agency or tenant account"
)
def register(body: RegisterRequest, db: Session = Depends(get_session)):
     user = auth_service.register(db, body)
     db.commit()
     return ApiResponse[TokenResponse](data=_build_token_response(user), message="Registration successful")


@router.post(
     "/login",
     response_model=ApiResponse[TokenResponse],
     summary="Exchange email and password for a bearer token"
)
def login(body: LoginRequest, db: Session = Depends(get_session)):
     user = auth_service.authenticate(db, body.email, body.password)
     return ApiResponse[TokenResponse](data=_build_token_response(user))


@router.get(
     "/me",
     response_model=ApiResponse[UserResponse],
     summary="Get the authenticated user"
)
def me(user: User = Depends(get_current_user)):
     return ApiResponse[UserResponse](data=UserResponse.model_validate(user))


@router.put(
     "/me",
     response_model=ApiResponse[UserResponse],
     summary="Update the authenticated user's profile"
)
def update_me(body: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_session)):
     user = auth_service.update_profile(db, user, body.model_dump(exclude_unset=True))
     db.commit()
     return ApiResponse[UserResponse](data=UserResponse.model_validate(user), message="Profile updated")


@router.post(
     "/change-password",
     response_model=MessageResponse,
     summary="Change the authenticated user's password"
)
def change_password(body: PasswordChange, user: User = Depends(get_current_user), db: Session = Depends(get_session)):
     auth_service.change_password(db, user, body.current_password, body.new_password)
     db.commit()
     return MessageResponse(message="Password changed successfully")
