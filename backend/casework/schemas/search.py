"""
Casework Backend: Search Schemas
==================================

What:  Response models for the global search and for search suggestions.
"""

import enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SearchCategory(str, enum.Enum):
    ALL = "all"
    CASES = "cases"
    HELPERS = "helpers"
    REPORTS = "reports"
    BILLING = "billing"
    SERVICES = "services"
    CONTACTS = "contacts"


class SearchResult(BaseModel):
    """
    One hit of the global search, already shaped for the result list.

    `score` decides the order; `relevance_score` is the finer fuzzy-based value
    the frontend shows as a relevance bar.
    """
    id: str = Field(description="Category-prefixed identifier, e.g. 'case-12'")
    type: str = Field(description="case, helper, report, billing, service or contact")
    category: SearchCategory
    title: str
    subtitle: str
    href: str = Field(description="Frontend route of the detail page")
    status: Optional[str] = None
    approved: Optional[bool] = None
    score: int = Field(ge=0, description="Ranking score")
    relevance_score: int = Field(default=0, ge=0)
    formatted_title: str = Field(default="", description="Title with <mark> highlights")
    formatted_subtitle: str = Field(default="", description="Subtitle with <mark> highlights")


class SearchResponse(BaseModel):
    results: List[SearchResult]
    total_count: int = Field(description="Hits across all categories before truncation")
    query: str
    category: SearchCategory


class SuggestionItem(BaseModel):
    type: str = Field(description="recent, correction or template")
    text: str
    icon: str
    query: str = Field(description="Query to run when the suggestion is picked")


class SuggestionResponse(BaseModel):
    query: str
    suggestions: List[SuggestionItem]
