# routers/maintenance.py
"""
Maintenance ticket API routes.

Role-based access:
- Owner / Agency / Manager: tickets on their properties (managers need the maintenance flags)
- Tenant: tickets on their own unit; may open new ones
- Maintenance staff: tickets assigned to them; may only move the status
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import MaintenanceTicket
from models.enums import TicketPriority, TicketStatus
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from schemas.maintenance import TicketAssign, TicketCreate, TicketResponse, TicketStatusUpdate, TicketUpdate
from services import maintenance_service
from services.access_service import AccessScope
from services.permissions import Capability
from services.policy import Action, Resource
from services.scoping import check_property_filter, paginate, require_role

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


def build_ticket_response(ticket: MaintenanceTicket) -> TicketResponse:
     response = TicketResponse.model_validate(ticket)
     if ticket.unit is not None:
          response.unit_number = ticket.unit.unit_number
          response.property_id = ticket.unit.property_id
          response.property_name = ticket.unit.property.name
     if ticket.tenant is not None:
          response.tenant_name = ticket.tenant.full_name
     if ticket.assignee is not None:
          response.assignee_name = ticket.assignee.full_name
     return response


@router.get(
     "",
     response_model=PaginatedResponse[TicketResponse],
     summary="List maintenance tickets"
)
def list_tickets(
     status: Optional[TicketStatus] = Query(None, description="Filter by status"),
     priority: Optional[TicketPriority] = Query(None, description="Filter by priority"),
     property_id: Optional[int] = Query(None, alias="propertyId", description="Filter by property"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.MAINTENANCE, Action.READ)
     check_property_filter(scope, property_id, Resource.MAINTENANCE)
     query = maintenance_service.search_tickets(
          db, scope, Capability.VIEW_MAINTENANCE, status=status, priority=priority, property_id=property_id
     )
     items, pagination = paginate(query, page, page_size)
     return PaginatedResponse[TicketResponse](
          data=[build_ticket_response(t) for t in items],
          pagination=pagination,
     )


@router.get(
     "/{ticket_id}",
     response_model=ApiResponse[TicketResponse],
     summary="Get a maintenance ticket"
)
def get_ticket(ticket_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.MAINTENANCE, Action.READ)
     ticket = maintenance_service.get_ticket(db, scope, ticket_id)
     return ApiResponse[TicketResponse](data=build_ticket_response(ticket))


@router.post(
     "",
     response_model=ApiResponse[TicketResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Open a maintenance ticket"
)
def create_ticket(body: TicketCreate, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.MAINTENANCE, Action.CREATE)
     ticket = maintenance_service.create_ticket(db, scope, body.model_dump())
     db.commit()
     return ApiResponse[TicketResponse](data=build_ticket_response(ticket), message="Maintenance request created")


@router.put(
     "/{ticket_id}",
     response_model=ApiResponse[TicketResponse],
     summary="Edit a maintenance ticket"
)
def update_ticket(
     ticket_id: int,
     body: TicketUpdate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.MAINTENANCE, Action.UPDATE)
     ticket = maintenance_service.update_ticket(db, scope, ticket_id, body.model_dump(exclude_unset=True))
     db.commit()
     return ApiResponse[TicketResponse](data=build_ticket_response(ticket), message="Maintenance request updated")


@router.patch(
     "/{ticket_id}/status",
     response_model=ApiResponse[TicketResponse],
     summary="Move a ticket through its status workflow"
)
def change_ticket_status(
     ticket_id: int,
     body: TicketStatusUpdate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """
     Allowed moves:
     - **pending** -> in_progress or cancelled
     - **in_progress** -> completed or cancelled
     """
     require_role(scope, Resource.MAINTENANCE, Action.UPDATE)
     ticket = maintenance_service.change_status(db, scope, ticket_id, body.status)
     db.commit()
     return ApiResponse[TicketResponse](data=build_ticket_response(ticket), message="Status updated")


@router.patch(
     "/{ticket_id}/assign",
     response_model=ApiResponse[TicketResponse],
     summary="Assign maintenance staff to a ticket"
)
def assign_ticket(
     ticket_id: int,
     body: TicketAssign,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.MAINTENANCE, Action.UPDATE)
     ticket = maintenance_service.assign_ticket(db, scope, ticket_id, body.assigned_to)
     db.commit()
     return ApiResponse[TicketResponse](data=build_ticket_response(ticket), message="Ticket assigned")


@router.delete(
     "/{ticket_id}",
     response_model=MessageResponse,
     summary="Delete a maintenance ticket"
)
def delete_ticket(ticket_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.MAINTENANCE, Action.DELETE)
     maintenance_service.delete_ticket(db, scope, ticket_id)
     db.commit()
     return MessageResponse(message="Maintenance request deleted")
