# routers/units.py
"""
Unit API routes.

Units live inside a property; scope and manager capabilities are those of the
parent property (structural changes need can_edit_property).
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import Tenant, Unit
from models.enums import UnitStatus
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from schemas.unit import UnitCreate, UnitResponse, UnitUpdate
from services import property_service
from services.access_service import AccessScope
from services.policy import Action, Resource
from services.scoping import paginate, require_role

router = APIRouter(prefix="/api/units", tags=["units"])


def _build_unit_response(unit: Unit, occupants: Dict[int, Tenant]) -> UnitResponse:
     response = UnitResponse.model_validate(unit)
     response.property_name = unit.property.name if unit.property else None
     occupant = occupants.get(unit.id)
     if occupant is not None:
          response.current_tenant_id = occupant.id
          response.current_tenant_name = occupant.full_name
     return response


@router.get(
     "",
     response_model=PaginatedResponse[UnitResponse],
     summary="List units"
)
def list_units(
     property_id: Optional[int] = Query(None, alias="propertyId", description="Filter by property"),
     status: Optional[UnitStatus] = Query(None, description="Filter by status"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.UNIT, Action.READ)
     query = property_service.search_units(db, scope, property_id=property_id, status=status)
     items, pagination = paginate(query, page, page_size)
     occupants = property_service.current_tenants(db, [u.id for u in items])
     return PaginatedResponse[UnitResponse](
          data=[_build_unit_response(u, occupants) for u in items],
          pagination=pagination,
     )


@router.get(
     "/{unit_id}",
     response_model=ApiResponse[UnitResponse],
     summary="Get a unit"
)
def get_unit(unit_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.UNIT, Action.READ)
     unit = property_service.get_unit(db, scope, unit_id)
     occupants = property_service.current_tenants(db, [unit.id])
     return ApiResponse[UnitResponse](data=_build_unit_response(unit, occupants))


@router.post(
     "",
     response_model=ApiResponse[UnitResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Create a unit"
)
def create_unit(body: UnitCreate, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.UNIT, Action.CREATE)
     unit = property_service.create_unit(db, scope, body.model_dump())
     db.commit()
     return ApiResponse[UnitResponse](data=_build_unit_response(unit, {}), message="Unit created")


@router.put(
     "/{unit_id}",
     response_model=ApiResponse[UnitResponse],
     summary="Update a unit"
)
def update_unit(
     unit_id: int,
     body: UnitUpdate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.UNIT, Action.UPDATE)
     unit = property_service.update_unit(db, scope, unit_id, body.model_dump(exclude_unset=True))
     db.commit()
     occupants = property_service.current_tenants(db, [unit.id])
     return ApiResponse[UnitResponse](data=_build_unit_response(unit, occupants), message="Unit updated")


@router.delete(
     "/{unit_id}",
     response_model=MessageResponse,
     summary="Delete a unit"
)
def delete_unit(unit_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     """Delete a unit. Its tenants are kept, moved out and marked exited."""
     require_role(scope, Resource.UNIT, Action.DELETE)
     property_service.delete_unit(db, scope, unit_id)
     db.commit()
     return MessageResponse(message="Unit deleted")
