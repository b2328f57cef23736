"""
Casework Backend: Vacation Period Validator
=============================================

What:  Decides whether a requested vacation period may be stored.
How:   The caller fetches the helper's other vacations and passes them in as
       VacationPeriod values. The validators RETURN the rejection (or None);
       raising it is the caller's decision.

Rules:
    Create:  from_date >= to_date         → DateOrderError
             from_date <  today           → PastDateError
             overlaps another vacation    → OverlapError
    Update:  to_date   <  from_date       → DateOrderError
             overlaps another vacation    → OverlapError

    The create rule rejects one-day vacations (from == to), the update rule
    accepts them. Which of the two is correct is still an open product question.

    Overlap uses closed intervals, so sharing a single boundary day counts:
        existing.from_date <= to_date AND existing.to_date >= from_date
    Approval state of the other vacations is ignored.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional

from casework.exceptions import (
    DateOrderError,
    OverlapError,
    PastDateError,
    VacationValidationError,
)


@dataclass(frozen=True)
class VacationPeriod:
    """An already stored vacation as seen by the validator."""
    id: Any
    helper_id: Any
    from_date: date
    to_date: date
    approved: bool = False


def periods_overlap(a_from: date, a_to: date, b_from: date, b_to: date) -> bool:
    return a_from <= b_to and a_to >= b_from


def find_overlaps(
    helper_id: Any,
    from_date: date,
    to_date: date,
    existing: Iterable[VacationPeriod],
    exclude_id: Any = None,
) -> List[VacationPeriod]:
    """Existing vacations of the same helper that collide with [from_date, to_date]."""
    return [
        period
        for period in existing
        if period.helper_id == helper_id
        and (exclude_id is None or period.id != exclude_id)
        and periods_overlap(period.from_date, period.to_date, from_date, to_date)
    ]


def validate_new_vacation(
    helper_id: Any,
    from_date: date,
    to_date: date,
    existing: Iterable[VacationPeriod],
    today: Optional[date] = None,
) -> Optional[VacationValidationError]:
    """Check a vacation request before it is created."""
    today = today or date.today()

    if from_date >= to_date:
        return DateOrderError(from_date, to_date)
    if from_date < today:
        return PastDateError(from_date, today)

    conflicts = find_overlaps(helper_id, from_date, to_date, existing)
    if conflicts:
        return OverlapError([period.id for period in conflicts])
    return None


def validate_vacation_update(
    vacation_id: Any,
    helper_id: Any,
    from_date: date,
    to_date: date,
    existing: Iterable[VacationPeriod],
) -> Optional[VacationValidationError]:
    """Check edited dates of an existing vacation. No past-date rule here."""
    if to_date < from_date:
        return DateOrderError(from_date, to_date)

    conflicts = find_overlaps(helper_id, from_date, to_date, existing, exclude_id=vacation_id)
    if conflicts:
        return OverlapError([period.id for period in conflicts])
    return None


def vacation_days(from_date: date, to_date: date) -> int:
    """Calendar days covered, both ends included."""
    return (to_date - from_date).days + 1
