"""
Casework Backend: Summary and Statistics Service Unit Tests
=============================================================

What we test:
    ✅ Case summary counts approved hours only
    ✅ Helper summary availability and this-month figures
    ✅ Dashboard sums every logged hour and classifies helpers
    ✅ Monthly report groups by case
    ✅ Dashboard period arithmetic
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from casework.core.availability import Availability
from casework.exceptions import DatabaseError, NotFoundError
from casework.models.case import Case, CaseStatus
from casework.models.helper import Helper
from casework.services.stats_service import StatsService, month_bounds, period_start


class TestCaseSummary:

    def setup_method(self):
        self.service = StatsService()

    @pytest.mark.asyncio
    async def test_approved_hours_only(
        self, mock_db_session, make_result, make_service, make_assignment, sample_case, sample_helper,
    ):
        make_service(sample_case, sample_helper, date(2024, 6, 3), 2)
        make_service(sample_case, sample_helper, date(2024, 6, 4), 2)
        make_service(sample_case, sample_helper, date(2024, 6, 5), 2, approved=False)
        make_assignment(sample_helper, sample_case)
        mock_db_session.execute.return_value = make_result(one=sample_case)

        summary = await self.service.case_summary(mock_db_session, 3)

        assert summary.used_hours == 4.0
        assert summary.remaining_hours == 196.0
        assert summary.total_costs == 102.0
        assert summary.service_count == 3
        assert summary.approved_service_count == 2
        assert summary.client_name == "Max Müller"
        assert [h.id for h in summary.assigned_helpers] == [7]

    @pytest.mark.asyncio
    async def test_inactive_assignment_not_listed(
        self, mock_db_session, make_result, make_assignment, sample_case, sample_helper,
    ):
        make_assignment(sample_helper, sample_case, active=False)
        mock_db_session.execute.return_value = make_result(one=sample_case)

        summary = await self.service.case_summary(mock_db_session, 3)

        assert summary.assigned_helpers == []
        assert summary.used_hours == 0.0

    @pytest.mark.asyncio
    async def test_missing_case(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(one=None)
        with pytest.raises(NotFoundError):
            await self.service.case_summary(mock_db_session, 3)


class TestHelperSummary:

    def setup_method(self):
        self.service = StatsService()

    def _cases(self, count, status=CaseStatus.IN_PROGRESS.value):
        return [
            Case(id=100 + i, first_name="Kind", last_name=str(i), status=status)
            for i in range(count)
        ]

    @pytest.mark.asyncio
    async def test_partially_available_with_three_active_cases(
        self, mock_db_session, make_result, make_assignment, sample_helper,
    ):
        for case in self._cases(3):
            make_assignment(sample_helper, case)
        make_assignment(sample_helper, self._cases(1, status=CaseStatus.CLOSED.value)[0])
        mock_db_session.execute.return_value = make_result(one=sample_helper)

        summary = await self.service.helper_summary(mock_db_session, 7, today=date(2024, 6, 5))

        assert summary.availability == Availability.PARTIALLY_AVAILABLE
        assert summary.active_cases == 3
        assert summary.total_cases == 4

    @pytest.mark.asyncio
    async def test_unavailable_during_approved_vacation(
        self, mock_db_session, make_result, make_vacation, sample_helper,
    ):
        sample_helper.vacations = [make_vacation(7, date(2024, 6, 1), date(2024, 6, 10), approved=True)]
        mock_db_session.execute.return_value = make_result(one=sample_helper)

        summary = await self.service.helper_summary(mock_db_session, 7, today=date(2024, 6, 5))

        assert summary.availability == Availability.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_this_month_hours(
        self, mock_db_session, make_result, make_service, sample_case, sample_helper,
    ):
        make_service(sample_case, sample_helper, date(2024, 5, 30), 3)
        make_service(sample_case, sample_helper, date(2024, 6, 3), 2)
        make_service(sample_case, sample_helper, date(2024, 6, 4), 1.5, approved=False)
        mock_db_session.execute.return_value = make_result(one=sample_helper)

        summary = await self.service.helper_summary(mock_db_session, 7, today=date(2024, 6, 5))

        assert summary.total_hours == 5.0
        assert summary.this_month_hours == 2.0
        assert summary.this_month_revenue == 51.0
        assert summary.availability == Availability.AVAILABLE

    @pytest.mark.asyncio
    async def test_this_month_counted_in_utc(
        self, mock_db_session, make_result, make_service, sample_case, sample_helper,
    ):
        late = make_service(sample_case, sample_helper, date(2024, 6, 30), 1)
        berlin = timezone(timedelta(hours=2))
        late.start_time = datetime(2024, 7, 1, 0, 30, tzinfo=berlin)
        late.end_time = datetime(2024, 7, 1, 1, 30, tzinfo=berlin)
        mock_db_session.execute.return_value = make_result(one=sample_helper)

        summary = await self.service.helper_summary(mock_db_session, 7, today=date(2024, 6, 5))

        assert summary.this_month_hours == 1.0

    @pytest.mark.asyncio
    async def test_missing_helper(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(one=None)
        with pytest.raises(NotFoundError):
            await self.service.helper_summary(mock_db_session, 7)


class TestDashboard:

    def setup_method(self):
        self.service = StatsService()

    @pytest.mark.asyncio
    async def test_counts(
        self, mock_db_session, make_result, make_service, make_vacation, sample_case, sample_helper,
    ):
        away = Helper(id=8, first_name="Jonas", last_name="Weber")
        away.assignments = []
        away.vacations = [make_vacation(8, date(2024, 6, 1), date(2024, 6, 10), approved=True)]
        sample_helper.assignments = []
        sample_helper.vacations = []

        closed = Case(
            id=4, first_name="Lea", last_name="Koch", status=CaseStatus.CLOSED.value,
            created_at=datetime(2023, 1, 1, tzinfo=timezone.utc),
        )
        services = [
            make_service(sample_case, sample_helper, date(2024, 6, 3), 2),
            make_service(sample_case, sample_helper, date(2024, 6, 4), 2, approved=False),
        ]
        untimed = make_service(sample_case, sample_helper, date(2024, 6, 4), 1, approved=False)
        untimed.end_time = None

        mock_db_session.execute = AsyncMock(side_effect=[
            make_result(rows=[sample_helper, away]),
            make_result(rows=[sample_case, closed]),
            make_result(rows=services + [untimed]),
        ])

        now = datetime(2024, 6, 5, 12, 0, tzinfo=timezone.utc)
        stats = await self.service.dashboard(mock_db_session, "year", now=now)

        assert stats.helpers.total == 2
        assert stats.helpers.unavailable == 1
        assert stats.helpers.available == 1
        assert stats.cases.total == 2
        assert stats.cases.active == 1
        assert stats.cases.completed == 1
        assert stats.cases.new_in_period == 1
        assert stats.services.total_services == 3
        assert stats.services.total_hours == 4.0
        assert stats.services.total_costs == 102.0
        assert stats.services.pending == 1
        assert stats.services.approved == 1
        assert stats.time_range == "year"

    @pytest.mark.asyncio
    async def test_unknown_range_falls_back_to_week(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(rows=[])
        stats = await self.service.dashboard(mock_db_session, "decade")
        assert stats.time_range == "week"

    @pytest.mark.asyncio
    async def test_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
        with pytest.raises(DatabaseError):
            await self.service.dashboard(mock_db_session)


class TestMonthlyReport:

    @pytest.mark.asyncio
    async def test_groups_by_case(self, mock_db_session, make_result, make_service, sample_case, sample_helper):
        other = Case(id=4, case_number="F-2024-002", first_name="Lea", last_name="Koch")
        rows = [
            make_service(sample_case, sample_helper, date(2024, 6, 3), 2),
            make_service(sample_case, sample_helper, date(2024, 6, 4), 1.5, approved=False),
            make_service(other, sample_helper, date(2024, 6, 5), 1),
        ]
        mock_db_session.execute.return_value = make_result(rows=rows)

        report = await StatsService().monthly_report(mock_db_session, 2024, 6)

        assert report.service_count == 3
        assert report.total_hours == 4.5
        assert report.total_costs == 114.75
        assert [(c.case_id, c.hours, c.approved_hours) for c in report.cases] == [
            (3, 3.5, 2.0),
            (4, 1.0, 1.0),
        ]


class TestPeriods:

    def test_period_start(self):
        now = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)
        assert period_start("week", now) == datetime(2024, 3, 24, 12, 0, tzinfo=timezone.utc)
        assert period_start("month", now) == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)
        assert period_start("quarter", now) == datetime(2023, 12, 31, 12, 0, tzinfo=timezone.utc)
        assert period_start("year", now) == datetime(2023, 3, 31, 12, 0, tzinfo=timezone.utc)

    def test_month_bounds_december(self):
        start, end = month_bounds(2024, 12)
        assert start == datetime(2024, 12, 1, tzinfo=timezone.utc)
        assert end == datetime(2025, 1, 1, tzinfo=timezone.utc)
