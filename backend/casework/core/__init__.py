"""
Casework Backend: Core Business Rules
=======================================

What:  Pure, synchronous functions holding the business rules of the system.
How:   Every function takes plain values (strings, dates, small dataclasses)
       that the service layer has already fetched, and returns plain values.
       Nothing in this package touches the database, the network or settings.

Module Inventory:
    - relevance.py:     Integer relevance score for the global search
    - fuzzy.py:         Levenshtein similarity, fuzzy match, suggestions, highlighting
    - vacations.py:     Vacation date-order / past-date / overlap validation
    - hours.py:         Service durations, hour sums and cost
    - availability.py:  Helper availability classification
"""

from casework.core.availability import Availability, classify_availability
from casework.core.fuzzy import fuzzy_match, levenshtein_distance, word_similarity
from casework.core.hours import (
    ServiceInterval,
    duration_hours,
    round_hours,
    total_hours,
    used_hours,
)
from casework.core.relevance import rank_by_score, relevance_score
from casework.core.vacations import (
    VacationPeriod,
    validate_new_vacation,
    validate_vacation_update,
    vacation_days,
)

__all__ = [
    "Availability",
    "ServiceInterval",
    "VacationPeriod",
    "classify_availability",
    "duration_hours",
    "fuzzy_match",
    "levenshtein_distance",
    "rank_by_score",
    "relevance_score",
    "round_hours",
    "total_hours",
    "used_hours",
    "vacation_days",
    "validate_new_vacation",
    "validate_vacation_update",
    "word_similarity",
]
