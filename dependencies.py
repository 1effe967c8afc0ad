"""
FastAPI dependencies shared by the routers: the authenticated user and the
access scope derived from it.
"""
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError
from sqlalchemy.orm import Session

from database import get_session
from models import User
from services.access_service import AccessScope, resolve_scope
from services.auth_service import decode_access_token


def _unauthorized(detail: str) -> HTTPException:
     return HTTPException(
          status_code=status.HTTP_401_UNAUTHORIZED,
          detail=detail,
          headers={"WWW-Authenticate": "Bearer"},
     )


def get_current_user(request: Request, db: Session = Depends(get_session)) -> User:
     """
     Resolve the bearer token to an active User.

     The role used for every decision is the one stored on the user row; the
     token's `role` claim is informational only.
     """
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise _unauthorized("Missing token")
     token = auth.split(" ", 1)[1].strip()
     try:
          payload = decode_access_token(token)
     except JWTError:
          raise _unauthorized("Invalid or expired token")

     user_id = payload.get("id")
     if user_id is None:
          raise _unauthorized("Invalid token")
     user = db.query(User).filter(User.id == int(user_id)).first()
     if user is None or not user.is_active:
          raise _unauthorized("User not found or deactivated")
     return user


def get_scope(user: User = Depends(get_current_user), db: Session = Depends(get_session)) -> AccessScope:
     return resolve_scope(db, user)
