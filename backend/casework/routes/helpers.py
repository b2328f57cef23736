"""
Casework Backend: Helper Route Handlers
=========================================

What:  Helper summary and the helper's document store.

    GET    /api/helpers/{id}/summary
    GET    /api/helpers/{id}/documents
    POST   /api/helpers/{id}/documents                       (multipart upload)
    GET    /api/helpers/{id}/documents/{doc_id}/download
    DELETE /api/helpers/{id}/documents/{doc_id}
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from casework.database import get_db_session
from casework.schemas.common import ErrorResponse
from casework.schemas.document import DocumentListResponse, DocumentUploadResponse
from casework.schemas.stats import HelperSummary
from casework.services.document_service import document_service
from casework.services.stats_service import stats_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/helpers", tags=["Helpers"])


@router.get(
    "/{helper_id}/summary",
    response_model=HelperSummary,
    responses={404: {"description": "Helper not found", "model": ErrorResponse}},
    summary="Availability, caseload and hours of a helper",
    description="Hours and revenue count approved services only.",
)
async def helper_summary(
    helper_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> HelperSummary:
    return await stats_service.helper_summary(db, helper_id)


@router.get(
    "/{helper_id}/documents",
    response_model=DocumentListResponse,
    responses={404: {"description": "Helper not found", "model": ErrorResponse}},
    summary="List a helper's documents",
)
async def list_documents(
    helper_id: int,
    helper_view: bool = Query(default=False, description="Only documents released to the helper"),
    db: AsyncSession = Depends(get_db_session),
) -> DocumentListResponse:
    return await document_service.list_documents(db, helper_id, helper_view=helper_view)


@router.post(
    "/{helper_id}/documents",
    status_code=201,
    response_model=DocumentUploadResponse,
    responses={
        400: {"description": "Invalid file type or size", "model": ErrorResponse},
        404: {"description": "Helper not found", "model": ErrorResponse},
    },
    summary="Upload a document for a helper",
    description="PDF, JPEG, PNG, GIF, DOC or DOCX, at most 50MB.",
)
async def upload_document(
    helper_id: int,
    file: UploadFile = File(..., description="The document"),
    document_type: str = Form(default="other", max_length=50),
    name: str | None = Form(default=None, max_length=255),
    visible_to_helper: bool = Form(default=False),
    valid_until: date | None = Form(default=None),
    uploaded_by: str = Form(default="admin", max_length=100),
    db: AsyncSession = Depends(get_db_session),
) -> DocumentUploadResponse:
    content = await file.read()
    logger.info(
        "Received document upload for helper %s: filename=%s, size=%d bytes",
        helper_id, file.filename or "unknown", len(content),
    )
    try:
        return await document_service.upload_document(
            db,
            helper_id=helper_id,
            filename=file.filename or "upload",
            content=content,
            content_length=file.size,
            document_type=document_type,
            name=name,
            visible_to_helper=visible_to_helper,
            valid_until=valid_until,
            uploaded_by=uploaded_by,
        )
    finally:
        await file.close()


@router.get(
    "/{helper_id}/documents/{document_id}/download",
    responses={
        200: {"description": "Document file"},
        404: {"description": "Document not found", "model": ErrorResponse},
    },
    summary="Download a helper document",
)
async def download_document(
    helper_id: int,
    document_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> FileResponse:
    document, path = await document_service.open_document(db, helper_id, document_id)
    return FileResponse(
        path=str(path),
        media_type=document.mime_type,
        filename=document.original_name,
        headers={"Cache-Control": "no-cache"},
    )


@router.delete(
    "/{helper_id}/documents/{document_id}",
    status_code=204,
    responses={404: {"description": "Document not found", "model": ErrorResponse}},
    summary="Delete a helper document",
)
async def delete_document(
    helper_id: int,
    document_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await document_service.delete_document(db, helper_id, document_id)
    return Response(status_code=204)
