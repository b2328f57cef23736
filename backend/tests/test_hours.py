"""
Casework Backend: Hours/Cost Aggregator Unit Tests
====================================================
"""

from datetime import datetime, timedelta, timezone

import pytest

from casework.core.hours import (
    HOURLY_RATE,
    ServiceInterval,
    cost,
    duration_hours,
    round_hours,
    round_money,
    total_hours,
    used_hours,
)


def _interval(hours, approved, day=1):
    start = datetime(2024, 6, day, 9, 0, tzinfo=timezone.utc)
    return ServiceInterval(start=start, end=start + timedelta(hours=hours), approved=approved)


class TestDuration:

    def test_datetimes(self):
        assert duration_hours(_interval(2.5, True)) == 2.5

    def test_iso_strings_with_z_suffix(self):
        interval = ServiceInterval(start="2024-06-01T09:00:00Z", end="2024-06-01T10:30:00Z")
        assert duration_hours(interval) == 1.5

    @pytest.mark.parametrize("start,end", [
        (None, "2024-06-01T10:00:00Z"),
        ("2024-06-01T09:00:00Z", None),
        ("", ""),
        ("not a date", "2024-06-01T10:00:00Z"),
    ])
    def test_missing_or_malformed_is_zero(self, start, end):
        assert duration_hours(ServiceInterval(start=start, end=end)) == 0.0

    def test_naive_and_aware_mix_is_zero(self):
        interval = ServiceInterval(
            start=datetime(2024, 6, 1, 9, 0),
            end=datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc),
        )
        assert duration_hours(interval) == 0.0


class TestSums:

    def test_used_counts_approved_only(self):
        intervals = [_interval(2, True, 1), _interval(2, True, 2), _interval(2, False, 3)]
        assert used_hours(intervals) == 4.0
        assert total_hours(intervals) == 6.0

    def test_empty(self):
        assert used_hours([]) == 0
        assert total_hours([]) == 0

    def test_cost_uses_raw_hours(self):
        # 1h20m + 1h20m = 2.666..h; rounding first would bill 2.7h
        intervals = [_interval(4 / 3, True, 1), _interval(4 / 3, True, 2)]
        hours = used_hours(intervals)
        assert round_hours(hours) == 2.7
        assert round_money(cost(hours)) == 68.0
        assert round_money(cost(round_hours(hours))) == 68.85

    def test_default_rate(self):
        assert HOURLY_RATE == 25.50
        assert cost(4.0) == 102.0


class TestRounding:

    @pytest.mark.parametrize("value,expected", [(2.25, 2.3), (2.24, 2.2), (0.05, 0.1), (4.0, 4.0)])
    def test_round_hours_half_up(self, value, expected):
        assert round_hours(value) == expected

    def test_round_money(self):
        assert round_money(63.75) == 63.75
        assert round_money(cost(2.5)) == 63.75
