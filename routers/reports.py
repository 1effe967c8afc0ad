# routers/reports.py
"""
Report routes: revenue over time and occupancy per property.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_scope
from schemas.common import ApiResponse
from schemas.report import OccupancyReportResponse, RevenueReportResponse
from services import report_service
from services.access_service import AccessScope
from services.policy import Action, Resource
from services.scoping import check_property_filter, require_role

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get(
     "/revenue",
     response_model=ApiResponse[RevenueReportResponse],
     summary="Revenue by month"
)
def get_revenue_report(
     start_date: Optional[date] = Query(None, alias="startDate", description="First payment date (default: 12 months back)"),
     end_date: Optional[date] = Query(None, alias="endDate", description="Last payment date (default: today)"),
     property_id: Optional[int] = Query(None, alias="propertyId", description="Limit to one property"),
     db: Session = Depends(get_session),
     scope: AccessScope = Depends(get_scope)
):
     """Payments received in the window, grouped by calendar month and payment method."""
     require_role(scope, Resource.REPORT, Action.READ)
     check_property_filter(scope, property_id, Resource.PAYMENT)
     report = report_service.revenue_report(db, scope, start_date, end_date, property_id)
     return ApiResponse[RevenueReportResponse](data=RevenueReportResponse.model_validate(report))


@router.get(
     "/occupancy",
     response_model=ApiResponse[OccupancyReportResponse],
     summary="Occupancy per property"
)
def get_occupancy_report(db: Session = Depends(get_session), scope: AccessScope = Depends(get_scope)):
     require_role(scope, Resource.REPORT, Action.READ)
     report = report_service.occupancy_report(db, scope)
     return ApiResponse[OccupancyReportResponse](data=OccupancyReportResponse.model_validate(report))
