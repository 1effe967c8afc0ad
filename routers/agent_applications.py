# routers/agent_applications.py
"""
Agent application routes.

Submitting and checking an application are public; reviewing needs the
super admin role or the `manage_agents` permission.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from models.enums import ApplicationStatus
from schemas.agent import (
     AgentApplicationCreate,
     AgentApplicationResponse,
     ApplicationApprovalResponse,
     ApplicationRejectRequest,
     ApplicationStatusResponse,
)
from schemas.common import ApiResponse, PaginatedResponse
from services import agent_application_service
from services.access_service import AccessScope
from services.policy import Action, Resource
from services.scoping import paginate, require_role

router = APIRouter(prefix="/api/agent-applications", tags=["agent applications"])


@router.post(
     "",
     response_model=ApiResponse[AgentApplicationResponse],
     status_code=status.HTTP_201_CREATED,
     summary="Apply to become an agent"
)
def submit_application(body: AgentApplicationCreate, db: Session = Depends(get_session)):
     application = agent_application_service.submit(db, body.model_dump())
     db.commit()
     return ApiResponse[AgentApplicationResponse](
          data=AgentApplicationResponse.model_validate(application),
          message="Application submitted",
     )


@router.get(
     "/status",
     response_model=ApiResponse[ApplicationStatusResponse],
     summary="Check the status of an application"
)
def application_status(
     email: str = Query(..., min_length=3, description="Email the application was submitted with"),
     db: Session = Depends(get_session)
):
     application = agent_application_service.latest_for_email(db, email)
     return ApiResponse[ApplicationStatusResponse](data=ApplicationStatusResponse.model_validate(application))


@router.get(
     "",
     response_model=PaginatedResponse[AgentApplicationResponse],
     summary="List agent applications"
)
def list_applications(
     status: Optional[ApplicationStatus] = Query(None, description="pending, approved or rejected"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.AGENT_APPLICATION, Action.READ)
     items, pagination = paginate(agent_application_service.applications_query(db, status), page, page_size)
     return PaginatedResponse[AgentApplicationResponse](
          data=[AgentApplicationResponse.model_validate(a) for a in items],
          pagination=pagination,
     )


@router.get(
     "/{application_id}",
     response_model=ApiResponse[AgentApplicationResponse],
     summary="Get an agent application"
)
def get_application(application_id: int, db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.AGENT_APPLICATION, Action.READ)
     application = agent_application_service.get_application(db, application_id)
     return ApiResponse[AgentApplicationResponse](data=AgentApplicationResponse.model_validate(application))


@router.post(
     "/{application_id}/approve",
     response_model=ApiResponse[ApplicationApprovalResponse],
     summary="Approve an application and create the agent account"
)
def approve_application(
     application_id: int,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """
     Creates a user with role **agent** and a temporary password. The password
     is emailed to the applicant and returned here once.
     """
     require_role(scope, Resource.AGENT_APPLICATION, Action.UPDATE)
     application, temp_password = agent_application_service.approve(db, application_id, scope.user_id)
     db.commit()
     return ApiResponse[ApplicationApprovalResponse](
          data=ApplicationApprovalResponse(
               application=AgentApplicationResponse.model_validate(application),
               user_id=application.user_id,
               temporary_password=temp_password,
          ),
          message="Application approved",
     )


@router.post(
     "/{application_id}/reject",
     response_model=ApiResponse[AgentApplicationResponse],
     summary="Reject an application"
)
def reject_application(
     application_id: int,
     body: ApplicationRejectRequest,
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     require_role(scope, Resource.AGENT_APPLICATION, Action.UPDATE)
     application = agent_application_service.reject(db, application_id, scope.user_id, body.reason)
     db.commit()
     return ApiResponse[AgentApplicationResponse](
          data=AgentApplicationResponse.model_validate(application),
          message="Application rejected",
     )
