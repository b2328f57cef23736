"""
Casework Backend: Vacation Schemas
====================================

What:  Request bodies for creating/editing vacations and the response shape.
How:   Only type-level checks live here. Date order, past dates and overlaps
       are business rules checked by casework.core.vacations, so that the
       client gets a 400 with a specific error code instead of a generic 422.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class HelperRef(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class VacationCreate(BaseModel):
    helper_id: int = Field(gt=0)
    from_date: date
    to_date: date
    substitute_id: Optional[int] = Field(default=None, gt=0)
    note: Optional[str] = Field(default=None, max_length=2000)
    created_by: Optional[str] = Field(default=None, max_length=100)


class VacationUpdate(BaseModel):
    """
    Partial update. Omitted fields are left untouched; an explicit
    `"substitute_id": null` removes the substitute.
    """
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    substitute_id: Optional[int] = Field(default=None, gt=0)
    note: Optional[str] = Field(default=None, max_length=2000)


class VacationResponse(BaseModel):
    id: int
    helper: HelperRef
    substitute: Optional[HelperRef] = None
    from_date: date
    to_date: date
    days: int = Field(description="Calendar days, both ends included")
    approved: bool
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VacationFilter(BaseModel):
    helper_id: Optional[int] = None
    status: Optional[str] = Field(default=None, description="'approved' or 'pending'")
    year: Optional[int] = Field(default=None, ge=2000, le=2100)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        valid = {"approved", "pending"}
        if v not in valid:
            raise ValueError(f"Invalid status '{v}'. Must be one of: {valid}")
        return v


class VacationListResponse(BaseModel):
    vacations: List[VacationResponse]
    total_count: int
