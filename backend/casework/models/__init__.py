"""
Casework Backend: ORM Models
==============================

Importing this package registers every table with Base.metadata and lets
string-based relationship() targets resolve across modules.
"""

from casework.models.billing import Invoice, Report
from casework.models.case import Case, CaseStatus, HelperAssignment
from casework.models.contact import Contact
from casework.models.helper import Helper, HelperDocument
from casework.models.service_entry import ServiceEntry
from casework.models.vacation import Vacation

__all__ = [
    "Case",
    "CaseStatus",
    "Contact",
    "Helper",
    "HelperAssignment",
    "HelperDocument",
    "Invoice",
    "Report",
    "ServiceEntry",
    "Vacation",
]
