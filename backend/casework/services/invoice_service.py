"""
Casework Backend: Invoice Service
===================================

What:  Creates outgoing invoices for a case and reads them back.
How:   Invoice numbers are R-<year>-<nnnn>, counted per invoice year.
       Without explicit hours the case's approved service hours are billed.
       total = raw hours x rate, rounded afterwards; payment is due INVOICE_PAYMENT_DAYS after the invoice date.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from casework.config import settings
from casework.core.hours import cost, round_hours, round_money, used_hours
from casework.exceptions import CaseworkError, DatabaseError, NotFoundError
from casework.models.billing import Invoice
from casework.models.case import Case
from casework.schemas.invoice import InvoiceCreate, InvoiceResponse

logger = logging.getLogger(__name__)


def format_invoice_number(year: int, sequence: int) -> str:
    return f"R-{year}-{sequence:04d}"


def _to_response(invoice: Invoice, case: Optional[Case]) -> InvoiceResponse:
    return InvoiceResponse(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        case_id=invoice.case_id,
        case_number=case.case_number if case is not None else None,
        client_name=case.client_name if case is not None else None,
        work_hours=invoice.work_hours,
        service_count=invoice.service_count,
        hourly_rate=invoice.hourly_rate,
        total_amount=invoice.total_amount,
        status=invoice.status,
        invoice_date=invoice.invoice_date,
        due_date=invoice.invoice_date + timedelta(days=settings.invoice_payment_days),
        note=invoice.note,
        created_at=invoice.created_at,
    )


class InvoiceService:

    async def _next_number(self, db: AsyncSession, year: int) -> str:
        result = await db.execute(
            select(func.count(Invoice.id)).where(
                Invoice.invoice_date >= date(year, 1, 1),
                Invoice.invoice_date <= date(year, 12, 31),
            )
        )
        return format_invoice_number(year, (result.scalar() or 0) + 1)

    async def create_invoice(
        self,
        db: AsyncSession,
        data: InvoiceCreate,
        today: Optional[date] = None,
    ) -> InvoiceResponse:
        """
        Raises:
            NotFoundError: case does not exist (→ 404)
            DatabaseError: query or insert failed, including a number collision (→ 500)
        """
        invoice_date = data.invoice_date or today or date.today()
        try:
            result = await db.execute(
                select(Case).options(selectinload(Case.services)).where(Case.id == data.case_id)
            )
            case = result.scalar_one_or_none()
            if case is None:
                raise NotFoundError(resource="case", resource_id=str(data.case_id))

            if data.work_hours is None:
                intervals = [s.to_interval() for s in case.services]
                raw_hours = used_hours(intervals)
                work_hours = round_hours(raw_hours)
                service_count = sum(1 for i in intervals if i.approved)
            else:
                raw_hours = work_hours = data.work_hours
                service_count = 0
            if data.service_count is not None:
                service_count = data.service_count

            rate = data.hourly_rate or settings.hourly_rate
            invoice = Invoice(
                case_id=case.id,
                invoice_number=await self._next_number(db, invoice_date.year),
                work_hours=work_hours,
                service_count=service_count,
                hourly_rate=rate,
                total_amount=round_money(cost(raw_hours, rate)),
                status="erstellt",
                invoice_date=invoice_date,
                note=data.note,
                created_by=data.created_by,
            )
            db.add(invoice)
            await db.flush()

        except CaseworkError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating invoice for case %s: %s", data.case_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the invoice. Please try again.",
                context={"case_id": data.case_id},
            )

        logger.info(
            "Invoice %s created for case %s: %.1f h x %.2f = %.2f",
            invoice.invoice_number, case.id, work_hours, rate, invoice.total_amount,
        )
        return _to_response(invoice, case)

    async def get_invoice(self, db: AsyncSession, invoice_id: int) -> InvoiceResponse:
        try:
            result = await db.execute(
                select(Invoice).options(selectinload(Invoice.case)).where(Invoice.id == invoice_id)
            )
            invoice = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching invoice %s: %s", invoice_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the invoice. Please try again.",
                context={"invoice_id": invoice_id},
            )
        if invoice is None:
            raise NotFoundError(resource="invoice", resource_id=str(invoice_id))
        return _to_response(invoice, invoice.case)


invoice_service = InvoiceService()
