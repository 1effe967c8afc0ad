# routers/managers.py
"""
Property manager routes.

/api/managers is the owner side: inviting managers to a property, changing
their permissions and revoking them. /api/manager-portal is the manager side:
answering invitations and listing the properties they manage.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import PropertyManager
from models.enums import ManagerStatus, UserRole
from schemas.common import ApiResponse
from schemas.property import PropertyResponse
from schemas.manager import ManagedPropertyResponse, ManagerAssignmentResponse, ManagerInvite, ManagerUpdate
from services import manager_service, property_service
from services.access_service import AccessScope
from services.exceptions import ForbiddenError
from services.permissions import parse_permissions
from services.policy import Action, Resource
from services.scoping import require_role

router = APIRouter(prefix="/api/managers", tags=["managers"])
portal_router = APIRouter(prefix="/api/manager-portal", tags=["manager portal"])


def _build_assignment_response(assignment: PropertyManager) -> ManagerAssignmentResponse:
     return ManagerAssignmentResponse(
          id=assignment.id,
          property_id=assignment.property_id,
          manager_id=assignment.manager_id,
          invited_by=assignment.invited_by,
          permissions=parse_permissions(assignment.permissions),
          status=assignment.status,
          created_at=assignment.created_at,
          updated_at=assignment.updated_at,
          property_name=assignment.property.name if assignment.property else None,
          manager_name=assignment.manager.full_name if assignment.manager else None,
          manager_email=assignment.manager.email if assignment.manager else None,
     )


# ---------------------------------------------------------------------------
# Owner side
# ---------------------------------------------------------------------------

@router.get(
     "/all",
     response_model=ApiResponse[List[ManagerAssignmentResponse]],
     summary="List managers across all of the caller's properties"
)
def list_all_managers(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.MANAGER, Action.READ)
     assignments = manager_service.list_all_managers(db, scope)
     return ApiResponse[List[ManagerAssignmentResponse]](data=[_build_assignment_response(a) for a in assignments])


@router.get(
     "/properties/{property_id}/managers",
     response_model=ApiResponse[List[ManagerAssignmentResponse]],
     summary="List managers of a property"
)
def list_property_managers(property_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.MANAGER, Action.READ)
     assignments = manager_service.list_property_managers(db, scope, property_id)
     return ApiResponse[List[ManagerAssignmentResponse]](data=[_build_assignment_response(a) for a in assignments])


@router.post(
     "/properties/{property_id}/managers",
     response_model=ApiResponse[ManagerAssignmentResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Invite a manager to a property"
)
def invite_manager(
     property_id: int,
     body: ManagerInvite,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """
     Invite a manager by email.

     Unknown emails get a manager account and an invitation email. The
     assignment stays **pending** until the manager accepts it.
     """
     require_role(scope, Resource.MANAGER, Action.CREATE)
     assignment = manager_service.invite_manager(
          db, scope, property_id, body.email, body.permissions,
          first_name=body.first_name,
          last_name=body.last_name,
          phone=body.phone,
     )
     db.commit()
     return ApiResponse[ManagerAssignmentResponse](
          data=_build_assignment_response(assignment), message="Manager invited"
     )


@router.put(
     "/properties/{property_id}/managers/{manager_id}",
     response_model=ApiResponse[ManagerAssignmentResponse],
     summary="Update a manager's permissions or status"
)
def update_manager(
     property_id: int,
     manager_id: int,
     body: ManagerUpdate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.MANAGER, Action.UPDATE)
     assignment = manager_service.update_manager(
          db, scope, property_id, manager_id, permissions=body.permissions, status=body.status
     )
     db.commit()
     return ApiResponse[ManagerAssignmentResponse](
          data=_build_assignment_response(assignment), message="Manager updated"
     )


@router.delete(
     "/properties/{property_id}/managers/{manager_id}",
     response_model=ApiResponse[ManagerAssignmentResponse],
     summary="Revoke a manager"
)
def revoke_manager(
     property_id: int,
     manager_id: int,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.MANAGER, Action.DELETE)
     assignment = manager_service.revoke_manager(db, scope, property_id, manager_id)
     db.commit()
     return ApiResponse[ManagerAssignmentResponse](
          data=_build_assignment_response(assignment), message="Manager removed"
     )


# ---------------------------------------------------------------------------
# Manager portal
# ---------------------------------------------------------------------------

def _require_manager(scope: AccessScope) -> None:
     if scope.role != UserRole.MANAGER:
          raise ForbiddenError("Only managers can use the manager portal")


@portal_router.get(
     "/assignments",
     response_model=ApiResponse[List[ManagerAssignmentResponse]],
     summary="List my property assignments"
)
def my_assignments(
     status: Optional[ManagerStatus] = Query(None, description="pending, active or revoked"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     _require_manager(scope)
     assignments = manager_service.my_assignments(db, scope.user_id, status)
     return ApiResponse[List[ManagerAssignmentResponse]](data=[_build_assignment_response(a) for a in assignments])


@portal_router.post(
     "/assignments/{assignment_id}/accept",
     response_model=ApiResponse[ManagerAssignmentResponse],
     summary="Accept a pending invitation"
)
def accept_assignment(assignment_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     _require_manager(scope)
     assignment = manager_service.accept_assignment(db, scope.user_id, assignment_id)
     db.commit()
     return ApiResponse[ManagerAssignmentResponse](
          data=_build_assignment_response(assignment), message="Invitation accepted"
     )


@portal_router.post(
     "/assignments/{assignment_id}/decline",
     response_model=ApiResponse[ManagerAssignmentResponse],
     summary="Decline a pending invitation"
)
def decline_assignment(assignment_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     _require_manager(scope)
     assignment = manager_service.decline_assignment(db, scope.user_id, assignment_id)
     db.commit()
     return ApiResponse[ManagerAssignmentResponse](
          data=_build_assignment_response(assignment), message="Invitation declined"
     )


@portal_router.get(
     "/properties",
     response_model=ApiResponse[List[ManagedPropertyResponse]],
     summary="List the properties I actively manage"
)
def my_properties(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     _require_manager(scope)
     assignments = manager_service.my_assignments(db, scope.user_id, ManagerStatus.ACTIVE)
     counts = property_service.unit_counts(db, [a.property_id for a in assignments])
     data = []
     for assignment in assignments:
          response = ManagedPropertyResponse.model_validate(
               {
                    **PropertyResponse.model_validate(assignment.property).model_dump(),
                    "assignment_id": assignment.id,
                    "permissions": parse_permissions(assignment.permissions),
               }
          )
          response.total_units, response.occupied_units = counts.get(assignment.property_id, (0, 0))
          data.append(response)
     return ApiResponse[List[ManagedPropertyResponse]](data=data)
