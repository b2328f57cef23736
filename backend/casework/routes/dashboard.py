"""
Casework Backend: Dashboard and Report Route Handlers
=======================================================

What:  GET /api/dashboard and GET /api/reports/monthly.
       Both sum every logged service, approved or not.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from casework.database import get_db_session
from casework.schemas.stats import DashboardStats, MonthlyReport
from casework.services.stats_service import stats_service

router = APIRouter(prefix="/api", tags=["Dashboard"])


@router.get(
    "/dashboard",
    response_model=DashboardStats,
    summary="Office dashboard figures",
)
async def dashboard(
    response: Response,
    time_range: str = Query(default="week", pattern="^(week|month|quarter|year)$"),
    db: AsyncSession = Depends(get_db_session),
) -> DashboardStats:
    result = await stats_service.dashboard(db, time_range=time_range)
    response.headers["Cache-Control"] = "private, max-age=60"
    return result


@router.get(
    "/reports/monthly",
    response_model=MonthlyReport,
    summary="Hours per case for one month",
    description="Defaults to the current month.",
)
async def monthly_report(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db_session),
) -> MonthlyReport:
    today = date.today()
    return await stats_service.monthly_report(db, year or today.year, month or today.month)
