"""
Casework Backend: Case Route Handlers
=======================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from casework.database import get_db_session
from casework.schemas.common import ErrorResponse
from casework.schemas.stats import CaseSummary
from casework.services.stats_service import stats_service

router = APIRouter(prefix="/api/cases", tags=["Cases"])


@router.get(
    "/{case_id}/summary",
    response_model=CaseSummary,
    responses={404: {"description": "Case not found", "model": ErrorResponse}},
    summary="Hours and costs of a case",
    description="Used hours and costs count approved services only.",
)
async def case_summary(
    case_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> CaseSummary:
    return await stats_service.case_summary(db, case_id)
