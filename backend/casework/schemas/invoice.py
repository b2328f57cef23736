"""
Casework Backend: Invoice Schemas
===================================
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class InvoiceCreate(BaseModel):
    """
    New invoice for a case.

    When `work_hours` is omitted, the case's approved service hours are billed
    and `service_count` becomes the number of approved services.
    """
    case_id: int = Field(gt=0)
    work_hours: Optional[float] = Field(default=None, ge=0)
    service_count: Optional[int] = Field(default=None, ge=0)
    hourly_rate: Optional[float] = Field(default=None, gt=0)
    invoice_date: Optional[date] = None
    note: Optional[str] = Field(default=None, max_length=2000)
    created_by: Optional[str] = Field(default=None, max_length=100)


class InvoiceResponse(BaseModel):
    id: int
    invoice_number: str
    case_id: int
    case_number: Optional[str] = None
    client_name: Optional[str] = None
    work_hours: float
    service_count: int
    hourly_rate: float
    total_amount: float
    status: str
    invoice_date: date
    due_date: date
    note: Optional[str] = None
    created_at: Optional[datetime] = None
