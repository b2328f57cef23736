"""
Casework Backend: Search Route Handlers
=========================================

What:  GET /api/search (global search) and GET /api/search/suggestions.
Who:   Called by the frontend's global search box while the user types.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casework.database import get_db_session
from casework.schemas.common import ErrorResponse
from casework.schemas.search import SearchCategory, SearchResponse, SuggestionResponse
from casework.services.search_service import search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Search"])


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={
        200: {"description": "Ranked hits", "model": SearchResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Search across all records",
    description=(
        "Searches cases, helpers, reports, invoices, services and contacts. "
        "Queries shorter than two characters return an empty result."
    ),
)
async def search(
    q: str = Query(default="", max_length=200, description="Search text"),
    category: SearchCategory = Query(default=SearchCategory.ALL),
    limit: int = Query(default=10, ge=1, le=100, description="Maximum number of hits returned"),
    db: AsyncSession = Depends(get_db_session),
) -> SearchResponse:
    return await search_service.search(db=db, query=q, category=category, limit=limit)


@router.get(
    "/search/suggestions",
    response_model=SuggestionResponse,
    summary="Suggestions for a partially typed query",
)
async def suggestions(
    q: str = Query(default="", max_length=200),
    recent: List[str] = Query(default=[], description="The user's recent searches, newest first"),
) -> SuggestionResponse:
    return search_service.suggestions(q, recent)
