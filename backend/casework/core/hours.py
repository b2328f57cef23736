"""
Casework Backend: Hours/Cost Aggregator
=========================================

What:  Turns logged service intervals into hours and money.

Two sums exist and must not be merged:
    used_hours()   approved intervals only  (case and helper views)
    total_hours()  every interval           (dashboard and monthly report)

Durations are fractional hours. Costs are computed from the raw sum; only
the displayed hour values are rounded (one decimal, half up).
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Union

HOURLY_RATE = 25.50

Timestamp = Union[datetime, str, None]


@dataclass(frozen=True)
class ServiceInterval:
    start: Timestamp
    end: Timestamp
    approved: bool = False


def _parse_timestamp(value: Timestamp) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def duration_hours(interval: ServiceInterval) -> float:
    """end - start in hours; 0.0 when either timestamp is missing or unparsable."""
    start = _parse_timestamp(interval.start)
    end = _parse_timestamp(interval.end)
    if start is None or end is None:
        return 0.0
    try:
        return (end - start).total_seconds() / 3600
    except TypeError:
        # naive vs aware datetimes
        return 0.0


def used_hours(intervals: Iterable[ServiceInterval]) -> float:
    return sum(duration_hours(i) for i in intervals if i.approved)


def total_hours(intervals: Iterable[ServiceInterval]) -> float:
    return sum(duration_hours(i) for i in intervals)


def cost(hours: float, rate: float = HOURLY_RATE) -> float:
    return hours * rate


def round_hours(hours: float) -> float:
    """One decimal, halves rounded up (2.25 → 2.3)."""
    return math.floor(hours * 10 + 0.5) / 10


def round_money(amount: float) -> float:
    return math.floor(amount * 100 + 0.5) / 100
