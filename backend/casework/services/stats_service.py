"""
Casework Backend: Summary and Statistics Service
==================================================

What:  Case summary, helper summary, dashboard figures and the monthly hours report.
How:   Loads rows with their relationships, converts service entries to
       ServiceInterval and vacations to VacationPeriod, and lets casework.core
       do the arithmetic.

Which hours are summed:
    case summary, helper summary     → approved services only (used_hours)
    dashboard, monthly report        → every logged service (total_hours)
"""

import calendar
import logging
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from casework.config import settings
from casework.core.availability import Availability, classify_availability
from casework.core.hours import (
    cost,
    duration_hours,
    round_hours,
    round_money,
    total_hours,
    used_hours,
)
from casework.exceptions import DatabaseError, NotFoundError
from casework.models.case import Case, CaseStatus, HelperAssignment
from casework.models.helper import Helper
from casework.models.service_entry import ServiceEntry
from casework.schemas.stats import (
    CaseStats,
    CaseSummary,
    DashboardStats,
    HelperStats,
    HelperSummary,
    MonthlyCaseHours,
    MonthlyReport,
    ServiceStats,
)
from casework.schemas.vacation import HelperRef

logger = logging.getLogger(__name__)

TIME_RANGES = ("week", "month", "quarter", "year")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _in_month(value: Optional[datetime], day: date) -> bool:
    moment = _as_utc(value)
    if moment is None:
        return False
    moment = moment.astimezone(timezone.utc)
    return (moment.year, moment.month) == (day.year, day.month)


def _months_before(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(time_range: str, now: datetime) -> datetime:
    """Start of the dashboard window; unknown ranges fall back to one week."""
    if time_range == "month":
        return _months_before(now, 1)
    if time_range == "quarter":
        return _months_before(now, 3)
    if time_range == "year":
        return _months_before(now, 12)
    return now - timedelta(days=7)


def month_bounds(year: int, month: int):
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


class StatsService:

    async def case_summary(self, db: AsyncSession, case_id: int) -> CaseSummary:
        """
        Hours and costs of one case.

        Only approved services count; pending ones show up in service_count
        but not in used_hours.
        """
        try:
            result = await db.execute(
                select(Case)
                .options(
                    selectinload(Case.services),
                    selectinload(Case.assignments).selectinload(HelperAssignment.helper),
                )
                .where(Case.id == case_id)
            )
            case = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading case %s: %s", case_id, str(e))
            raise DatabaseError(
                message="Could not load the case summary. Please try again.",
                context={"case_id": case_id},
            )
        if case is None:
            raise NotFoundError(resource="case", resource_id=str(case_id))

        intervals = [service.to_interval() for service in case.services]
        hours = used_hours(intervals)
        planned = settings.planned_case_hours

        return CaseSummary(
            id=case.id,
            case_number=case.case_number,
            client_name=case.client_name,
            status=case.status,
            used_hours=round_hours(hours),
            planned_hours=planned,
            remaining_hours=round_hours(max(planned - hours, 0.0)),
            total_costs=round_money(cost(hours, settings.hourly_rate)),
            service_count=len(intervals),
            approved_service_count=sum(1 for i in intervals if i.approved),
            assigned_helpers=[
                HelperRef.model_validate(a.helper)
                for a in case.assignments
                if a.active and a.helper is not None
            ],
        )

    async def helper_summary(
        self,
        db: AsyncSession,
        helper_id: int,
        today: Optional[date] = None,
    ) -> HelperSummary:
        today = today or datetime.now(timezone.utc).date()
        try:
            result = await db.execute(
                select(Helper)
                .options(
                    selectinload(Helper.assignments).selectinload(HelperAssignment.case),
                    selectinload(Helper.services),
                    selectinload(Helper.vacations),
                )
                .where(Helper.id == helper_id)
            )
            helper = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading helper %s: %s", helper_id, str(e))
            raise DatabaseError(
                message="Could not load the helper summary. Please try again.",
                context={"helper_id": helper_id},
            )
        if helper is None:
            raise NotFoundError(resource="helper", resource_id=str(helper_id))

        active_cases = sum(1 for a in helper.assignments if a.counts_as_active)
        availability = classify_availability(
            [v.to_period() for v in helper.vacations],
            active_cases,
            today=today,
            busy_threshold=settings.busy_case_threshold,
        )

        intervals = [s.to_interval() for s in helper.services]
        this_month = [
            s.to_interval()
            for s in helper.services
            if _in_month(s.start_time, today)
        ]
        month_hours = used_hours(this_month)

        return HelperSummary(
            id=helper.id,
            first_name=helper.first_name,
            last_name=helper.last_name,
            email=helper.email,
            availability=availability,
            total_cases=len(helper.assignments),
            active_cases=active_cases,
            total_hours=round_hours(used_hours(intervals)),
            this_month_hours=round_hours(month_hours),
            this_month_revenue=round_money(cost(month_hours, settings.hourly_rate)),
            hourly_rate=settings.hourly_rate,
        )

    async def dashboard(
        self,
        db: AsyncSession,
        time_range: str = "week",
        now: Optional[datetime] = None,
    ) -> DashboardStats:
        """
        Office dashboard: helper availability, case counts and the services
        logged within `time_range` (week, month, quarter or year back from now).
        """
        now = now or datetime.now(timezone.utc)
        if time_range not in TIME_RANGES:
            time_range = "week"
        start = period_start(time_range, now)

        try:
            helper_result = await db.execute(
                select(Helper).options(
                    selectinload(Helper.vacations),
                    selectinload(Helper.assignments).selectinload(HelperAssignment.case),
                )
            )
            helpers = list(helper_result.scalars().all())

            case_result = await db.execute(select(Case))
            cases = list(case_result.scalars().all())

            service_result = await db.execute(
                select(ServiceEntry).where(ServiceEntry.created_at >= start)
            )
            services = list(service_result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error building dashboard: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load dashboard statistics. Please try again.",
                context={"time_range": time_range},
            )

        today = now.date()
        classes = [
            classify_availability(
                [v.to_period() for v in helper.vacations],
                sum(1 for a in helper.assignments if a.counts_as_active),
                today=today,
                busy_threshold=settings.busy_case_threshold,
            )
            for helper in helpers
        ]
        unavailable = classes.count(Availability.UNAVAILABLE)

        # only entries with both timestamps count as pending or approved
        timed = [s for s in services if s.start_time is not None and s.end_time is not None]
        hours = total_hours(s.to_interval() for s in timed)

        return DashboardStats(
            helpers=HelperStats(
                total=len(helpers),
                available=len(helpers) - unavailable,
                partially_available=classes.count(Availability.PARTIALLY_AVAILABLE),
                unavailable=unavailable,
            ),
            cases=CaseStats(
                total=len(cases),
                active=sum(1 for c in cases if c.status == CaseStatus.IN_PROGRESS.value),
                completed=sum(1 for c in cases if c.status == CaseStatus.CLOSED.value),
                new_in_period=sum(
                    1 for c in cases
                    if c.created_at is not None and _as_utc(c.created_at) >= start
                ),
            ),
            services=ServiceStats(
                total_services=len(services),
                total_hours=round_hours(hours),
                total_costs=round_money(cost(hours, settings.hourly_rate)),
                pending=sum(1 for s in timed if not s.approved),
                approved=sum(1 for s in timed if s.approved),
            ),
            time_range=time_range,
            generated_at=now,
        )

    async def monthly_report(self, db: AsyncSession, year: int, month: int) -> MonthlyReport:
        """Hours per case for services starting in the given month, approved or not."""
        start, end = month_bounds(year, month)
        try:
            result = await db.execute(
                select(ServiceEntry)
                .options(selectinload(ServiceEntry.case))
                .where(ServiceEntry.start_time >= start, ServiceEntry.start_time < end)
                .order_by(ServiceEntry.case_id, ServiceEntry.start_time)
            )
            services = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error building monthly report: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not build the monthly report. Please try again.",
                context={"year": year, "month": month},
            )

        by_case = OrderedDict()
        for service in services:
            by_case.setdefault(service.case_id, []).append(service)

        rows = []
        for case_id, entries in by_case.items():
            intervals = [e.to_interval() for e in entries]
            case = entries[0].case
            rows.append(MonthlyCaseHours(
                case_id=case_id,
                case_number=case.case_number if case is not None else None,
                client_name=case.client_name if case is not None else "",
                hours=round_hours(total_hours(intervals)),
                approved_hours=round_hours(used_hours(intervals)),
                service_count=len(entries),
            ))

        hours = sum(duration_hours(s.to_interval()) for s in services)
        logger.debug("Monthly report %04d-%02d: %d services, %.2f h", year, month, len(services), hours)

        return MonthlyReport(
            year=year,
            month=month,
            total_hours=round_hours(hours),
            total_costs=round_money(cost(hours, settings.hourly_rate)),
            service_count=len(services),
            cases=rows,
        )


stats_service = StatsService()
