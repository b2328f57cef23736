"""
Casework Backend: Summary and Statistics Schemas
==================================================

What:  Case and helper summaries (approved hours only), the dashboard and the
       monthly hours report (all hours, approved or not).
       Hour values are rounded to one decimal; money to cents.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from casework.core.availability import Availability
from casework.schemas.vacation import HelperRef


class CaseSummary(BaseModel):
    id: int
    case_number: Optional[str] = None
    client_name: str
    status: str
    used_hours: float = Field(description="Approved service hours")
    planned_hours: float
    remaining_hours: float
    total_costs: float = Field(description="Approved hours x hourly rate")
    service_count: int
    approved_service_count: int
    assigned_helpers: List[HelperRef] = Field(default_factory=list)


class HelperSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    availability: Availability
    total_cases: int
    active_cases: int
    total_hours: float = Field(description="Approved service hours, all time")
    this_month_hours: float = Field(description="Approved service hours, current month")
    this_month_revenue: float
    hourly_rate: float


class HelperStats(BaseModel):
    total: int
    available: int = Field(description="Helpers not on an approved vacation today")
    partially_available: int
    unavailable: int


class CaseStats(BaseModel):
    total: int
    active: int
    completed: int
    new_in_period: int


class ServiceStats(BaseModel):
    total_services: int
    total_hours: float = Field(description="All logged hours in the period, approved or not")
    total_costs: float
    pending: int
    approved: int


class DashboardStats(BaseModel):
    helpers: HelperStats
    cases: CaseStats
    services: ServiceStats
    time_range: str
    generated_at: datetime


class MonthlyCaseHours(BaseModel):
    case_id: int
    case_number: Optional[str] = None
    client_name: str
    hours: float
    approved_hours: float
    service_count: int


class MonthlyReport(BaseModel):
    year: int
    month: int
    total_hours: float
    total_costs: float
    service_count: int
    cases: List[MonthlyCaseHours]
