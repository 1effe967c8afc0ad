# routers/notifications.py
"""
In-app notifications. Every route only ever touches the caller's own rows;
someone else's notification id is a 404.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models.enums import NotificationType, ReminderStatus
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from schemas.notification import (
     MarkAllReadResponse,
     NotificationResponse,
     ReminderLogResponse,
     ReminderRequest,
     UnreadCountResponse,
)
from services import notification_service, reminder_service
from services.access_service import AccessScope
from services.policy import Action, Resource
from services.scoping import paginate, require_role

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get(
     "",
     response_model=PaginatedResponse[NotificationResponse],
     summary="List my notifications"
)
def list_notifications(
     unread_only: bool = Query(False, alias="unreadOnly", description="Only unread notifications"),
     type: Optional[NotificationType] = Query(None, description="Filter by notification type"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     query = notification_service.user_notifications_query(db, scope.user_id, unread_only=unread_only, type=type)
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[NotificationResponse](
          data=[NotificationResponse.model_validate(n) for n in items],
          pagination=pagination,
     )


@router.get(
     "/unread-count",
     response_model=ApiResponse[UnreadCountResponse],
     summary="Number of unread notifications"
)
def get_unread_count(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     count = notification_service.unread_count(db, scope.user_id)
     return ApiResponse[UnreadCountResponse](data=UnreadCountResponse(count=count))


@router.patch(
     "/read-all",
     response_model=ApiResponse[MarkAllReadResponse],
     summary="Mark all my notifications as read"
)
def mark_all_read(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     updated = notification_service.mark_all_read(db, scope.user_id)
     db.commit()
     return ApiResponse[MarkAllReadResponse](
          data=MarkAllReadResponse(updated=updated),
          message=f"{updated} notification(s) marked as read",
     )


@router.patch(
     "/{notification_id}/read",
     response_model=ApiResponse[NotificationResponse],
     summary="Mark a notification as read"
)
def mark_read(notification_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     notification = notification_service.mark_read(db, scope.user_id, notification_id)
     db.commit()
     return ApiResponse[NotificationResponse](data=NotificationResponse.model_validate(notification))


@router.delete(
     "/{notification_id}",
     response_model=MessageResponse,
     summary="Delete a notification"
)
def delete_notification(notification_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     notification_service.delete_notification(db, scope.user_id, notification_id)
     db.commit()
     return MessageResponse(message="Notification deleted")


@router.post(
     "/tenant/{tenant_id}/payment-reminder",
     response_model=ApiResponse[ReminderLogResponse],
     summary="Email a rent reminder to a tenant"
)
def send_payment_reminder(
     tenant_id: int,
     body: Optional[ReminderRequest] = None,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """
     Sends the reminder and records it in the reminder log. A delivery
     failure is still logged, with status **failed**.
     """
     require_role(scope, Resource.TENANT, Action.UPDATE)
     log = reminder_service.send_payment_reminder(db, scope, tenant_id, body.message if body else None)
     db.commit()
     return ApiResponse[ReminderLogResponse](
          data=ReminderLogResponse.model_validate(log),
          message=f"Reminder {ReminderStatus(log.status).value}",
     )
