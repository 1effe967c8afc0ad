# routers/properties.py
"""
Property API routes.

Role-based access:
- Owner / Agency: own properties (create, update, soft delete)
- Manager: properties with an active assignment (update needs can_edit_property)
- Tenant: the property of their unit, read only
- Super admin: everything, including deleted properties
"""
from typing import Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models import Property
from models.enums import PropertyType
from schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from schemas.property import PropertyCreate, PropertyResponse, PropertyUpdate
from services import property_service
from services.access_service import AccessScope
from services.exceptions import ForbiddenError
from services.policy import Action, Resource
from services.scoping import paginate, require_role

router = APIRouter(prefix="/api/properties", tags=["properties"])


def build_property_response(prop: Property, counts: Dict[int, Tuple[int, int]]) -> PropertyResponse:
     response = PropertyResponse.model_validate(prop)
     response.total_units, response.occupied_units = counts.get(prop.id, (0, 0))
     return response


def _require_super_admin(scope: AccessScope) -> None:
     if not scope.is_super_admin:
          raise ForbiddenError("Only administrators can manage deleted properties")


@router.get(
     "",
     response_model=PaginatedResponse[PropertyResponse],
     summary="List properties"
)
def list_properties(
     search: Optional[str] = Query(None, description="Match on name or address"),
     type: Optional[PropertyType] = Query(None, description="Filter by property type"),
     city: Optional[str] = Query(None, description="Filter by city"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.PROPERTY, Action.READ)
     query = property_service.search_properties(db, scope, search=search, type=type, city=city)
     items, pagination = paginate(query, page, page_size)
     counts = property_service.unit_counts(db, [p.id for p in items])
     return PaginatedResponse[PropertyResponse](
          data=[build_property_response(p, counts) for p in items],
          pagination=pagination,
     )


@router.get(
     "/deleted",
     response_model=PaginatedResponse[PropertyResponse],
     summary="List soft-deleted properties"
)
def list_deleted_properties(
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     _require_super_admin(scope)
     items, pagination = paginate(property_service.deleted_properties_query(db, scope), page, page_size)
     counts = property_service.unit_counts(db, [p.id for p in items])
     return PaginatedResponse[PropertyResponse](
          data=[build_property_response(p, counts) for p in items],
          pagination=pagination,
     )


@router.get(
     "/{property_id}",
     response_model=ApiResponse[PropertyResponse],
     summary="Get a property"
)
def get_property(property_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.PROPERTY, Action.READ)
     prop = property_service.get_property(db, scope, property_id)
     counts = property_service.unit_counts(db, [prop.id])
     return ApiResponse[PropertyResponse](data=build_property_response(prop, counts))


@router.post(
     "",
     response_model=ApiResponse[PropertyResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Create a property"
)
def create_property(
     body: PropertyCreate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """
     Create a property owned by the caller.

     - **ownerId**: only honoured for super admins registering a property on
       an owner's behalf
     """
     require_role(scope, Resource.PROPERTY, Action.CREATE)
     owner_id = body.owner_id if scope.is_super_admin else None
     prop = property_service.create_property(db, scope, body.model_dump(), owner_id=owner_id)
     db.commit()
     return ApiResponse[PropertyResponse](data=build_property_response(prop, {}), message="Property created")


@router.put(
     "/{property_id}",
     response_model=ApiResponse[PropertyResponse],
     summary="Update a property"
)
def update_property(
     property_id: int,
     body: PropertyUpdate,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.PROPERTY, Action.UPDATE)
     prop = property_service.update_property(db, scope, property_id, body.model_dump(exclude_unset=True))
     db.commit()
     counts = property_service.unit_counts(db, [prop.id])
     return ApiResponse[PropertyResponse](data=build_property_response(prop, counts), message="Property updated")


@router.delete(
     "/{property_id}",
     response_model=MessageResponse,
     summary="Soft delete a property"
)
def delete_property(property_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.PROPERTY, Action.DELETE)
     property_service.soft_delete_property(db, scope, property_id)
     db.commit()
     return MessageResponse(message="Property deleted")


@router.post(
     "/{property_id}/restore",
     response_model=ApiResponse[PropertyResponse],
     summary="Restore a soft-deleted property"
)
def restore_property(property_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     _require_super_admin(scope)
     prop = property_service.restore_property(db, scope, property_id)
     db.commit()
     counts = property_service.unit_counts(db, [prop.id])
     return ApiResponse[PropertyResponse](data=build_property_response(prop, counts), message="Property restored")
