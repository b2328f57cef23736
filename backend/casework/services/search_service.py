"""
Casework Backend: Global Search Service
=========================================

What:  One search box over cases, helpers, reports, invoices, services and
       youth-office contacts.
How:   Each category runs its own case-insensitive LIKE query (newest first,
       at most `limit` rows), maps rows to SearchResult and scores the joined
       searchable text with casework.core.relevance. All hits are then ranked
       together and truncated to `limit`; total_count is the count before
       truncation.
Who:   Called by GET /api/search and GET /api/search/suggestions.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from casework.config import settings
from casework.core.fuzzy import advanced_relevance, highlight_matches, search_suggestions
from casework.core.hours import duration_hours, round_hours
from casework.core.relevance import rank_by_score, relevance_score
from casework.exceptions import DatabaseError
from casework.models.billing import Invoice, Report
from casework.models.case import Case
from casework.models.contact import Contact
from casework.models.helper import Helper
from casework.models.service_entry import ServiceEntry
from casework.schemas.search import (
    SearchCategory,
    SearchResponse,
    SearchResult,
    SuggestionItem,
    SuggestionResponse,
)

logger = logging.getLogger(__name__)

NO_PLACE = "Kein Ort"


def _joined(*parts: Optional[str]) -> str:
    return " ".join(part or "" for part in parts)


def _result(
    term: str,
    *,
    id: str,
    type: str,
    category: SearchCategory,
    title: str,
    subtitle: str,
    href: str,
    searchable: str,
    status: Optional[str] = None,
    approved: Optional[bool] = None,
) -> SearchResult:
    return SearchResult(
        id=id,
        type=type,
        category=category,
        title=title,
        subtitle=subtitle,
        href=href,
        status=status,
        approved=approved,
        score=relevance_score(term, searchable),
        relevance_score=advanced_relevance(
            term, f"{title} {subtitle}", threshold=settings.fuzzy_threshold,
        ),
        formatted_title=highlight_matches(title, term),
        formatted_subtitle=highlight_matches(subtitle, term),
    )


class SearchService:
    """Runs the per-category queries and merges their hits."""

    def __init__(self):
        self._searchers: Dict[SearchCategory, Callable] = {
            SearchCategory.CASES: self._search_cases,
            SearchCategory.HELPERS: self._search_helpers,
            SearchCategory.REPORTS: self._search_reports,
            SearchCategory.BILLING: self._search_billing,
            SearchCategory.SERVICES: self._search_services,
            SearchCategory.CONTACTS: self._search_contacts,
        }

    async def _rows(self, db: AsyncSession, query) -> Iterable:
        result = await db.execute(query)
        return result.scalars().all()

    async def _search_cases(self, db: AsyncSession, term: str, limit: int) -> List[SearchResult]:
        pattern = f"%{term}%"
        rows = await self._rows(
            db,
            select(Case)
            .where(or_(
                Case.first_name.ilike(pattern),
                Case.last_name.ilike(pattern),
                Case.case_number.ilike(pattern),
                Case.school.ilike(pattern),
                Case.city.ilike(pattern),
            ))
            .order_by(Case.created_at.desc())
            .limit(limit),
        )
        results = []
        for case in rows:
            place = case.school or case.city or NO_PLACE
            results.append(_result(
                term,
                id=f"case-{case.id}",
                type="case",
                category=SearchCategory.CASES,
                title=case.client_name,
                subtitle=f"{case.case_number} • {place}" if case.case_number else place,
                href=f"/cases/{case.id}",
                status=case.status,
                searchable=_joined(case.first_name, case.last_name, case.case_number, case.school),
            ))
        return results

    async def _search_helpers(self, db: AsyncSession, term: str, limit: int) -> List[SearchResult]:
        pattern = f"%{term}%"
        rows = await self._rows(
            db,
            select(Helper)
            .where(or_(
                Helper.first_name.ilike(pattern),
                Helper.last_name.ilike(pattern),
                Helper.email.ilike(pattern),
                Helper.city.ilike(pattern),
                Helper.highest_degree.ilike(pattern),
            ))
            .order_by(Helper.created_at.desc())
            .limit(limit),
        )
        return [
            _result(
                term,
                id=f"helper-{helper.id}",
                type="helper",
                category=SearchCategory.HELPERS,
                title=helper.full_name,
                subtitle=f"{helper.highest_degree or 'Helfer'} • {helper.city or NO_PLACE}",
                href=f"/helpers/{helper.id}",
                searchable=_joined(helper.first_name, helper.last_name, helper.email, helper.city),
            )
            for helper in rows
        ]

    async def _search_reports(self, db: AsyncSession, term: str, limit: int) -> List[SearchResult]:
        pattern = f"%{term}%"
        rows = await self._rows(
            db,
            select(Report)
            .options(selectinload(Report.case))
            .where(or_(Report.title.ilike(pattern), Report.content.ilike(pattern)))
            .order_by(Report.created_at.desc())
            .limit(limit),
        )
        return [
            _result(
                term,
                id=f"report-{report.id}",
                type="report",
                category=SearchCategory.REPORTS,
                title=report.title or "Unbenannter Bericht",
                subtitle=f"{report.case.client_name} • {report.total_hours or 0}h",
                href=f"/reports/{report.id}",
                status=report.status,
                searchable=_joined(report.title, report.content),
            )
            for report in rows
        ]

    async def _search_billing(self, db: AsyncSession, term: str, limit: int) -> List[SearchResult]:
        rows = await self._rows(
            db,
            select(Invoice)
            .options(selectinload(Invoice.case))
            .where(Invoice.invoice_number.ilike(f"%{term}%"))
            .order_by(Invoice.invoice_date.desc())
            .limit(limit),
        )
        return [
            _result(
                term,
                id=f"billing-{invoice.id}",
                type="billing",
                category=SearchCategory.BILLING,
                title=invoice.invoice_number,
                subtitle=f"{invoice.case.client_name} • €{invoice.total_amount or 0:.2f}",
                href=f"/billing/{invoice.id}",
                status=invoice.status,
                searchable=invoice.invoice_number,
            )
            for invoice in rows
        ]

    async def _search_services(self, db: AsyncSession, term: str, limit: int) -> List[SearchResult]:
        pattern = f"%{term}%"
        rows = await self._rows(
            db,
            select(ServiceEntry)
            .options(selectinload(ServiceEntry.case), selectinload(ServiceEntry.helper))
            .where(or_(
                ServiceEntry.location.ilike(pattern),
                ServiceEntry.note.ilike(pattern),
                ServiceEntry.service_type.ilike(pattern),
            ))
            .order_by(ServiceEntry.start_time.desc())
            .limit(limit),
        )
        results = []
        for service in rows:
            hours = round_hours(duration_hours(service.to_interval()))
            results.append(_result(
                term,
                id=f"service-{service.id}",
                type="service",
                category=SearchCategory.SERVICES,
                title=f"{service.service_type or 'Service'} - {service.case.client_name}",
                subtitle=f"{service.helper.full_name} • {hours}h • {service.location or NO_PLACE}",
                href=f"/services/{service.id}",
                approved=bool(service.approved),
                searchable=_joined(service.location, service.note, service.service_type),
            ))
        return results

    async def _search_contacts(self, db: AsyncSession, term: str, limit: int) -> List[SearchResult]:
        pattern = f"%{term}%"
        rows = await self._rows(
            db,
            select(Contact)
            .where(or_(
                Contact.name.ilike(pattern),
                Contact.youth_office.ilike(pattern),
                Contact.mail.ilike(pattern),
            ))
            .order_by(Contact.created_at.desc())
            .limit(limit),
        )
        return [
            _result(
                term,
                id=f"contact-{contact.id}",
                type="contact",
                category=SearchCategory.CONTACTS,
                title=contact.name,
                subtitle=f"{contact.youth_office} • {contact.mail or contact.phone or 'Kein Kontakt'}",
                href=f"/contacts/{contact.id}",
                searchable=_joined(contact.name, contact.youth_office, contact.mail),
            )
            for contact in rows
        ]

    async def search(
        self,
        db: AsyncSession,
        query: Optional[str],
        category: SearchCategory = SearchCategory.ALL,
        limit: Optional[int] = None,
    ) -> SearchResponse:
        """
        Search one category or all of them.

        Queries shorter than the configured minimum (2 characters after
        trimming) return an empty response without touching the database.
        Equal scores keep the category order cases → helpers → reports →
        billing → services → contacts, and within a category newest first.
        """
        term = (query or "").strip()
        limit = limit or settings.search_default_limit

        if len(term) < settings.search_min_query_length:
            return SearchResponse(results=[], total_count=0, query=term, category=category)

        results: List[SearchResult] = []
        try:
            for name, searcher in self._searchers.items():
                if category in (SearchCategory.ALL, name):
                    results.extend(await searcher(db, term, limit))
        except SQLAlchemyError as e:
            logger.error("Search query failed for %r: %s", term, str(e), exc_info=True)
            raise DatabaseError(
                message="Search is currently unavailable. Please try again.",
                context={"category": category.value},
            )

        ranked = rank_by_score(results, key=lambda r: r.score)
        logger.debug("Search %r in %s: %d hits", term, category.value, len(ranked))

        return SearchResponse(
            results=ranked[:limit],
            total_count=len(ranked),
            query=term,
            category=category,
        )

    def suggestions(self, query: str, recent_searches: Sequence[str] = ()) -> SuggestionResponse:
        items = search_suggestions(query, recent_searches)
        return SuggestionResponse(
            query=query,
            suggestions=[
                SuggestionItem(type=s.type, text=s.text, icon=s.icon, query=s.query)
                for s in items
            ],
        )


search_service = SearchService()
