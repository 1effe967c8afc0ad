# routers/dashboard.py
"""
Dashboard route: headline figures for whoever is signed in, limited to what
their scope can see.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from schemas.common import ApiResponse
from schemas.report import DashboardStatsResponse
from services import report_service
from services.access_service import AccessScope
from services.policy import Action, Resource
from services.scoping import require_role
from .maintenance import build_ticket_response
from .payments import build_payment_response

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get(
     "/stats",
     response_model=ApiResponse[DashboardStatsResponse],
     summary="Dashboard statistics"
)
def get_dashboard_stats(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.REPORT, Action.READ)
     stats = report_service.dashboard_stats(db, scope)
     data = DashboardStatsResponse(
          overview=stats["overview"],
          recent_payments=[build_payment_response(p) for p in stats["recent_payments"]],
          recent_maintenance=[build_ticket_response(t) for t in stats["recent_maintenance"]],
          current_period=stats["current_period"],
     )
     return ApiResponse[DashboardStatsResponse](data=data)
