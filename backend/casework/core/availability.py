"""
Casework Backend: Availability Classifier
===========================================

What:  Derives a helper's availability at read time. Nothing is stored.

    unavailable          an APPROVED vacation contains today
    partially_available  otherwise, with `busy_threshold` (3) or more active cases
    available            everything else

Dates are compared as ISO `YYYY-MM-DD` strings, so `date` objects and
strings from the database can be mixed freely.
"""

import enum
from datetime import date
from typing import Iterable, Optional, Union

from casework.core.vacations import VacationPeriod

BUSY_CASE_THRESHOLD = 3

DateLike = Union[date, str]


class Availability(str, enum.Enum):
    AVAILABLE = "available"
    PARTIALLY_AVAILABLE = "partially_available"
    UNAVAILABLE = "unavailable"


def _iso(value: DateLike) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def is_on_vacation(vacations: Iterable[VacationPeriod], today: Optional[date] = None) -> bool:
    day = _iso(today or date.today())
    return any(
        v.approved and _iso(v.from_date) <= day <= _iso(v.to_date)
        for v in vacations
    )


def classify_availability(
    vacations: Iterable[VacationPeriod],
    active_case_count: int,
    today: Optional[date] = None,
    busy_threshold: int = BUSY_CASE_THRESHOLD,
) -> Availability:
    if is_on_vacation(vacations, today):
        return Availability.UNAVAILABLE
    if active_case_count >= busy_threshold:
        return Availability.PARTIALLY_AVAILABLE
    return Availability.AVAILABLE
