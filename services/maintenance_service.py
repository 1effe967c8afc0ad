# services/maintenance_service.py
"""
Maintenance tickets: creation, edits, the status machine and staff assignment.

     pending -> in_progress -> completed
     pending | in_progress -> cancelled
"""
from typing import Optional

from sqlalchemy.orm import Session

from models import MaintenanceTicket, Tenant, Unit, User
from models.enums import (
     AuditEntityType,
     NotificationPriority,
     NotificationType,
     TenantStatus,
     TicketCategory,
     TicketPriority,
     TicketStatus,
     UserRole,
)
from logging_config import logger
from . import audit_service, notification_service
from .access_service import AccessScope
from .exceptions import BusinessRuleError, ForbiddenError
from .policy import Action, Resource
from .scoping import get_or_404, require_capability, ticket_query, unit_query

URGENT_PRIORITIES = (TicketPriority.HIGH, TicketPriority.URGENT)


def search_tickets(
     db: Session,
     scope: AccessScope,
     capability=None,
     status: Optional[TicketStatus] = None,
     priority: Optional[TicketPriority] = None,
     property_id: Optional[int] = None,
):
     query = ticket_query(db, scope, capability)
     if status is not None:
          query = query.filter(MaintenanceTicket.status == status)
     if priority is not None:
          query = query.filter(MaintenanceTicket.priority == priority)
     if property_id is not None:
          query = query.filter(
               MaintenanceTicket.unit_id.in_(db.query(Unit.id).filter(Unit.property_id == property_id))
          )
     return query.order_by(MaintenanceTicket.created_at.desc(), MaintenanceTicket.id.desc())


def get_ticket(db: Session, scope: AccessScope, ticket_id: int, action: Action = Action.READ) -> MaintenanceTicket:
     ticket = get_or_404(ticket_query(db, scope), MaintenanceTicket, ticket_id, "Maintenance ticket")
     require_capability(scope, ticket.unit.property_id, Resource.MAINTENANCE, action)
     return ticket


def _notify_ticket(db: Session, ticket: MaintenanceTicket, type: NotificationType, title: str, message: str,
                   actor_id: int, include_tenant: bool = False) -> None:
     recipients = notification_service.property_stakeholders(db, ticket.unit.property_id, exclude=actor_id)
     recipients.append(ticket.assigned_to)
     if include_tenant and ticket.tenant is not None:
          recipients.append(ticket.tenant.user_account_id)
     notification_service.notify_many(
          db,
          [uid for uid in recipients if uid != actor_id],
          type=type,
          title=title,
          message=message,
          priority=NotificationPriority.HIGH if ticket.priority in URGENT_PRIORITIES else NotificationPriority.NORMAL,
          entity_type=AuditEntityType.MAINTENANCE,
          entity_id=ticket.id,
     )


def create_ticket(db: Session, scope: AccessScope, data: dict) -> MaintenanceTicket:
     unit = get_or_404(unit_query(db, scope), Unit, data["unit_id"], "Unit")
     require_capability(scope, unit.property_id, Resource.MAINTENANCE, Action.CREATE)

     if scope.role == UserRole.TENANT:
          tenant_id = scope.tenant_id
     else:
          occupant = (
               db.query(Tenant)
               .filter(Tenant.unit_id == unit.id, Tenant.status != TenantStatus.EXITED)
               .first()
          )
          tenant_id = occupant.id if occupant else None

     ticket = MaintenanceTicket(
          unit_id=unit.id,
          tenant_id=tenant_id,
          category=data["category"],
          description=data["description"],
          priority=data.get("priority") or TicketPriority.MEDIUM,
          attachments=data.get("attachments") or [],
          status=TicketStatus.PENDING,
     )
     db.add(ticket)
     db.flush()

     audit_service.record(db, scope.user_id, "maintenance.create", AuditEntityType.MAINTENANCE, ticket.id,
                          f"{TicketCategory(ticket.category).value} issue in unit {unit.unit_number}")
     _notify_ticket(db, ticket, NotificationType.MAINTENANCE_NEW, "New maintenance request",
                    f"{TicketCategory(ticket.category).value} issue reported in unit {unit.unit_number}", scope.user_id)
     logger.info("Maintenance ticket %s opened on unit %s", ticket.id, unit.id)
     return ticket


def update_ticket(db: Session, scope: AccessScope, ticket_id: int, changes: dict) -> MaintenanceTicket:
     if scope.role == UserRole.MAINTENANCE:
          raise ForbiddenError("Maintenance staff can only change a ticket's status")
     ticket = get_ticket(db, scope, ticket_id, Action.UPDATE)
     if ticket.status in (TicketStatus.COMPLETED, TicketStatus.CANCELLED):
          raise BusinessRuleError("Closed tickets cannot be edited")
     for key, value in changes.items():
          setattr(ticket, key, value)
     db.flush()
     audit_service.record(db, scope.user_id, "maintenance.update", AuditEntityType.MAINTENANCE, ticket.id,
                          metadata={"fields": sorted(changes)})
     return ticket


def change_status(db: Session, scope: AccessScope, ticket_id: int, status: TicketStatus) -> MaintenanceTicket:
     ticket = get_ticket(db, scope, ticket_id, Action.UPDATE)
     if not ticket.can_transition_to(status):
          raise BusinessRuleError(f"Cannot move a ticket from {TicketStatus(ticket.status).value} to {status.value}")

     previous = TicketStatus(ticket.status)
     ticket.transition_to(status)
     db.flush()

     action = {
          TicketStatus.COMPLETED: "maintenance.complete",
          TicketStatus.CANCELLED: "maintenance.cancel",
     }.get(status, "maintenance.status_change")
     audit_service.record(db, scope.user_id, action, AuditEntityType.MAINTENANCE, ticket.id,
                          metadata={"from": previous.value, "to": status.value})
     _notify_ticket(db, ticket, NotificationType.MAINTENANCE_UPDATE, "Maintenance update",
                    f"Ticket #{ticket.id} is now {status.value.replace('_', ' ')}", scope.user_id,
                    include_tenant=True)
     return ticket


def assign_ticket(db: Session, scope: AccessScope, ticket_id: int, assignee_id: Optional[int]) -> MaintenanceTicket:
     if scope.role == UserRole.MAINTENANCE:
          raise ForbiddenError("Maintenance staff cannot reassign tickets")
     ticket = get_ticket(db, scope, ticket_id, Action.UPDATE)
     if assignee_id is not None:
          assignee = db.query(User).filter(User.id == assignee_id).first()
          if assignee is None or assignee.role != UserRole.MAINTENANCE or not assignee.is_active:
               raise BusinessRuleError("assignedTo must reference an active maintenance user")
     ticket.assigned_to = assignee_id
     db.flush()
     audit_service.record(db, scope.user_id, "maintenance.assign", AuditEntityType.MAINTENANCE, ticket.id,
                          metadata={"assigned_to": assignee_id})
     if assignee_id is not None:
          notification_service.notify(
               db, assignee_id, NotificationType.MAINTENANCE_NEW, "Ticket assigned to you",
               f"Ticket #{ticket.id}: {ticket.description[:120]}",
               entity_type=AuditEntityType.MAINTENANCE, entity_id=ticket.id,
          )
     return ticket


def delete_ticket(db: Session, scope: AccessScope, ticket_id: int) -> None:
     ticket = get_ticket(db, scope, ticket_id, Action.DELETE)
     audit_service.record(db, scope.user_id, "maintenance.delete", AuditEntityType.MAINTENANCE, ticket.id)
     db.delete(ticket)
     db.flush()
