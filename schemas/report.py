# schemas/report.py
"""
Pydantic schemas for the dashboard and the revenue / occupancy reports.
"""
from datetime import date
from typing import Dict, List

from models.enums import PropertyType
from .common import CamelModel, Money
from .maintenance import TicketResponse
from .payment import PaymentResponse


class DashboardOverview(CamelModel):
     total_properties: int
     total_units: int
     occupied_units: int
     vacant_units: int
     occupancy_rate: int
     total_tenants: int
     active_tenants: int
     late_tenants: int
     total_revenue: Money
     pending_maintenance: int


class ReportPeriod(CamelModel):
     month: int
     year: int


class DashboardStatsResponse(CamelModel):
     overview: DashboardOverview
     recent_payments: List[PaymentResponse]
     recent_maintenance: List[TicketResponse]
     current_period: ReportPeriod


class RevenuePeriod(CamelModel):
     period: str
     total: Money
     count: int
     by_method: Dict[str, Money]


class RevenueReportResponse(CamelModel):
     total_revenue: Money
     payment_count: int
     average_payment: Money
     period_data: List[RevenuePeriod]
     start_date: date
     end_date: date


class UnitOccupancy(CamelModel):
     total: int
     occupied: int
     vacant: int
     maintenance: int
     occupancy_rate: int


class RentAtStake(CamelModel):
     potential: Money
     actual: Money
     loss: Money


class PropertyOccupancy(CamelModel):
     id: int
     name: str
     address: str
     type: PropertyType
     units: UnitOccupancy
     revenue: RentAtStake


class OccupancyTotals(CamelModel):
     total_units: int
     occupied_units: int
     vacant_units: int
     overall_occupancy_rate: int
     potential_revenue: Money
     actual_revenue: Money
     revenue_loss: Money


class OccupancyReportResponse(CamelModel):
     properties: List[PropertyOccupancy]
     totals: OccupancyTotals
