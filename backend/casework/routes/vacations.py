"""
Casework Backend: Vacation Route Handlers
===========================================

What:  CRUD for helper vacations plus the approval action.

Rejected dates come back as 400 with `details.code` set to one of
`date_order`, `past_date` or `overlap`.
"""

import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from casework.database import get_db_session
from casework.schemas.common import ErrorResponse
from casework.schemas.vacation import (
    VacationCreate,
    VacationFilter,
    VacationListResponse,
    VacationResponse,
    VacationUpdate,
)
from casework.services.vacation_service import vacation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vacations", tags=["Vacations"])


@router.get(
    "",
    response_model=VacationListResponse,
    summary="List vacations",
    description="Newest first. `status` is 'approved' or 'pending'; `year` keeps vacations inside that year.",
)
async def list_vacations(
    response: Response,
    helper_id: int | None = Query(default=None, gt=0),
    status: str | None = Query(default=None, pattern="^(approved|pending)$"),
    year: int | None = Query(default=None, ge=2000, le=2100),
    db: AsyncSession = Depends(get_db_session),
) -> VacationListResponse:
    result = await vacation_service.list_vacations(
        db, VacationFilter(helper_id=helper_id, status=status, year=year),
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.post(
    "",
    status_code=201,
    response_model=VacationResponse,
    responses={
        201: {"description": "Vacation requested", "model": VacationResponse},
        400: {"description": "Dates rejected", "model": ErrorResponse},
        404: {"description": "Helper not found", "model": ErrorResponse},
    },
    summary="Request a vacation",
)
async def create_vacation(
    data: VacationCreate,
    db: AsyncSession = Depends(get_db_session),
) -> VacationResponse:
    """
    Create an unapproved vacation request.

    The end date must lie after the start date, the start may not be in the
    past, and the period may not overlap another vacation of the same helper.
    """
    return await vacation_service.create_vacation(db, data)


@router.get(
    "/{vacation_id}",
    response_model=VacationResponse,
    responses={404: {"description": "Vacation not found", "model": ErrorResponse}},
    summary="Get a vacation",
)
async def get_vacation(
    vacation_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> VacationResponse:
    return await vacation_service.get_vacation(db, vacation_id)


@router.put(
    "/{vacation_id}",
    response_model=VacationResponse,
    responses={
        400: {"description": "Dates rejected", "model": ErrorResponse},
        404: {"description": "Vacation or substitute not found", "model": ErrorResponse},
    },
    summary="Edit a vacation",
)
async def update_vacation(
    vacation_id: int,
    data: VacationUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> VacationResponse:
    return await vacation_service.update_vacation(db, vacation_id, data)


@router.delete(
    "/{vacation_id}",
    status_code=204,
    responses={404: {"description": "Vacation not found", "model": ErrorResponse}},
    summary="Delete a vacation",
)
async def delete_vacation(
    vacation_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await vacation_service.delete_vacation(db, vacation_id)
    return Response(status_code=204)


@router.post(
    "/{vacation_id}/approve",
    response_model=VacationResponse,
    responses={404: {"description": "Vacation not found", "model": ErrorResponse}},
    summary="Approve a vacation",
)
async def approve_vacation(
    vacation_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> VacationResponse:
    return await vacation_service.approve_vacation(db, vacation_id)
