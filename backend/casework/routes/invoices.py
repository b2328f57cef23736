"""
Casework Backend: Invoice Route Handlers
==========================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from casework.database import get_db_session
from casework.schemas.common import ErrorResponse
from casework.schemas.invoice import InvoiceCreate, InvoiceResponse
from casework.services.invoice_service import invoice_service

router = APIRouter(prefix="/api/invoices", tags=["Invoices"])


@router.post(
    "",
    status_code=201,
    response_model=InvoiceResponse,
    responses={404: {"description": "Case not found", "model": ErrorResponse}},
    summary="Create an invoice for a case",
    description=(
        "Bills the given hours, or the case's approved service hours when "
        "`work_hours` is omitted. The invoice is due 14 days after its date."
    ),
)
async def create_invoice(
    data: InvoiceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceResponse:
    return await invoice_service.create_invoice(db, data)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"description": "Invoice not found", "model": ErrorResponse}},
    summary="Get an invoice",
)
async def get_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceResponse:
    return await invoice_service.get_invoice(db, invoice_id)
