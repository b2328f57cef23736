"""
Casework Backend: Vacation Validator Unit Tests
=================================================

Existing vacation of helper 1 in every test: 2024-06-01 .. 2024-06-10.
"""

from datetime import date

import pytest

from casework.core.vacations import (
    VacationPeriod,
    find_overlaps,
    validate_new_vacation,
    validate_vacation_update,
    vacation_days,
)
from casework.exceptions import DateOrderError, OverlapError, PastDateError, ValidationError

TODAY = date(2024, 5, 1)


@pytest.fixture
def existing():
    return [
        VacationPeriod(id=1, helper_id=1, from_date=date(2024, 6, 1), to_date=date(2024, 6, 10)),
        VacationPeriod(id=2, helper_id=2, from_date=date(2024, 6, 1), to_date=date(2024, 6, 30)),
    ]


class TestCreateValidation:

    def test_overlapping_request_rejected(self, existing):
        error = validate_new_vacation(1, date(2024, 6, 5), date(2024, 6, 15), existing, today=TODAY)
        assert isinstance(error, OverlapError)
        assert error.conflicting_ids == [1]
        assert error.context["code"] == "overlap"

    def test_adjacent_request_accepted(self, existing):
        assert validate_new_vacation(1, date(2024, 6, 11), date(2024, 6, 20), existing, today=TODAY) is None

    def test_shared_boundary_day_rejected(self, existing):
        error = validate_new_vacation(1, date(2024, 6, 10), date(2024, 6, 20), existing, today=TODAY)
        assert isinstance(error, OverlapError)

    def test_enclosing_request_rejected(self, existing):
        error = validate_new_vacation(1, date(2024, 5, 20), date(2024, 6, 20), existing, today=TODAY)
        assert isinstance(error, OverlapError)

    def test_other_helpers_vacations_ignored(self, existing):
        assert validate_new_vacation(3, date(2024, 6, 5), date(2024, 6, 15), existing, today=TODAY) is None

    def test_approval_state_irrelevant_for_overlap(self):
        approved = [VacationPeriod(1, 1, date(2024, 6, 1), date(2024, 6, 10), approved=True)]
        pending = [VacationPeriod(1, 1, date(2024, 6, 1), date(2024, 6, 10), approved=False)]
        for existing in (approved, pending):
            error = validate_new_vacation(1, date(2024, 6, 5), date(2024, 6, 6), existing, today=TODAY)
            assert isinstance(error, OverlapError)

    def test_end_before_start_rejected(self):
        error = validate_new_vacation(1, date(2024, 6, 10), date(2024, 6, 1), [], today=TODAY)
        assert isinstance(error, DateOrderError)
        assert error.code == "date_order"

    def test_single_day_rejected_on_create(self):
        error = validate_new_vacation(1, date(2024, 6, 10), date(2024, 6, 10), [], today=TODAY)
        assert isinstance(error, DateOrderError)

    def test_start_in_past_rejected(self):
        error = validate_new_vacation(1, date(2024, 4, 30), date(2024, 5, 5), [], today=TODAY)
        assert isinstance(error, PastDateError)
        assert error.context == {
            "code": "past_date",
            "field": "from_date",
            "from_date": "2024-04-30",
            "today": "2024-05-01",
        }

    def test_start_today_accepted(self):
        assert validate_new_vacation(1, TODAY, date(2024, 5, 3), [], today=TODAY) is None

    def test_date_order_checked_before_past_date(self):
        error = validate_new_vacation(1, date(2024, 4, 1), date(2024, 3, 1), [], today=TODAY)
        assert isinstance(error, DateOrderError)

    def test_errors_are_validation_errors(self, existing):
        error = validate_new_vacation(1, date(2024, 6, 5), date(2024, 6, 15), existing, today=TODAY)
        assert isinstance(error, ValidationError)
        assert error.field == "from_date"


class TestUpdateValidation:

    def test_own_period_excluded(self, existing):
        assert validate_vacation_update(1, 1, date(2024, 6, 2), date(2024, 6, 12), existing) is None

    def test_overlap_with_another_vacation(self, existing):
        others = existing + [VacationPeriod(3, 1, date(2024, 7, 1), date(2024, 7, 5))]
        error = validate_vacation_update(3, 1, date(2024, 6, 9), date(2024, 7, 5), others)
        assert isinstance(error, OverlapError)
        assert error.conflicting_ids == [1]

    def test_single_day_allowed_on_update(self, existing):
        assert validate_vacation_update(1, 1, date(2024, 6, 3), date(2024, 6, 3), existing) is None

    def test_end_before_start_rejected(self, existing):
        error = validate_vacation_update(1, 1, date(2024, 6, 3), date(2024, 6, 2), existing)
        assert isinstance(error, DateOrderError)

    def test_past_dates_not_checked(self, existing):
        assert validate_vacation_update(1, 1, date(2001, 1, 1), date(2001, 1, 5), existing) is None


class TestHelpers:

    def test_find_overlaps_lists_every_conflict(self):
        periods = [
            VacationPeriod(1, 1, date(2024, 6, 1), date(2024, 6, 3)),
            VacationPeriod(2, 1, date(2024, 6, 8), date(2024, 6, 9)),
            VacationPeriod(3, 1, date(2024, 7, 1), date(2024, 7, 2)),
        ]
        conflicts = find_overlaps(1, date(2024, 6, 3), date(2024, 6, 8), periods)
        assert [p.id for p in conflicts] == [1, 2]

    def test_vacation_days_inclusive(self):
        assert vacation_days(date(2024, 6, 1), date(2024, 6, 10)) == 10
        assert vacation_days(date(2024, 6, 1), date(2024, 6, 1)) == 1
