# services/notification_service.py
"""
In-app notifications.

`notify` only stages a row on the caller's session: the notification commits
with the action that caused it and is dropped if that action rolls back.
Reads and mutations are always restricted to the recipient.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session

from models import Notification, PropertyManager, Property
from models.enums import (
     AuditEntityType,
     ManagerStatus,
     NotificationPriority,
     NotificationType,
)
from .exceptions import NotFoundError


def notify(
     db: Session,
     user_id: Optional[int],
     type: NotificationType,
     title: str,
     message: str,
     priority: NotificationPriority = NotificationPriority.NORMAL,
     entity_type: Optional[AuditEntityType] = None,
     entity_id: Optional[int] = None,
     action_url: Optional[str] = None,
     metadata: Optional[Dict[str, Any]] = None,
     expires_at: Optional[datetime] = None,
) -> Optional[Notification]:
     if user_id is None:
          return None
     notification = Notification(
          user_id=user_id,
          type=type,
          title=title,
          message=message,
          priority=priority,
          entity_type=entity_type,
          entity_id=entity_id,
          action_url=action_url,
          extra=metadata or {},
          expires_at=expires_at,
     )
     db.add(notification)
     return notification


def notify_many(db: Session, user_ids: Iterable[Optional[int]], **kwargs) -> int:
     """Notify each distinct user once; returns how many rows were staged."""
     count = 0
     for user_id in dict.fromkeys(uid for uid in user_ids if uid is not None):
          notify(db, user_id, **kwargs)
          count += 1
     return count


def property_stakeholders(db: Session, property_id: int, exclude: Optional[int] = None) -> list:
     """Owner, agency and active managers of a property."""
     prop = db.query(Property).filter(Property.id == property_id).first()
     if prop is None:
          return []
     ids = [prop.user_id, prop.agency_id]
     ids.extend(
          row[0]
          for row in db.query(PropertyManager.manager_id)
          .filter(
               PropertyManager.property_id == property_id,
               PropertyManager.status == ManagerStatus.ACTIVE,
          )
          .all()
     )
     return [uid for uid in ids if uid is not None and uid != exclude]


# ---------------------------------------------------------------------------
# Recipient-side operations
# ---------------------------------------------------------------------------

def user_notifications_query(
     db: Session,
     user_id: int,
     unread_only: bool = False,
     type: Optional[NotificationType] = None,
):
     query = db.query(Notification).filter(
          Notification.user_id == user_id,
          or_(Notification.expires_at.is_(None), Notification.expires_at > datetime.utcnow()),
     )
     if unread_only:
          query = query.filter(Notification.is_read.is_(False))
     if type is not None:
          query = query.filter(Notification.type == type)
     return query.order_by(desc(Notification.created_at), desc(Notification.id))


def unread_count(db: Session, user_id: int) -> int:
     return user_notifications_query(db, user_id, unread_only=True).order_by(None).count()


def _get_own(db: Session, user_id: int, notification_id: int) -> Notification:
     notification = (
          db.query(Notification)
          .filter(Notification.id == notification_id, Notification.user_id == user_id)
          .first()
     )
     if notification is None:
          raise NotFoundError.for_entity("Notification", notification_id)
     return notification


def mark_read(db: Session, user_id: int, notification_id: int) -> Notification:
     notification = _get_own(db, user_id, notification_id)
     notification.mark_read()
     db.flush()
     return notification


def mark_all_read(db: Session, user_id: int) -> int:
     updated = (
          db.query(Notification)
          .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
          .update({"is_read": True, "read_at": datetime.utcnow()}, synchronize_session=False)
     )
     db.flush()
     return updated


def delete_notification(db: Session, user_id: int, notification_id: int) -> None:
     db.delete(_get_own(db, user_id, notification_id))
     db.flush()
