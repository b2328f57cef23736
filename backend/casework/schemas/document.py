"""
Casework Backend: Helper Document Schemas
===========================================
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class DocumentResponse(BaseModel):
    id: int
    helper_id: int
    name: str = Field(description="Original filename")
    document_type: str
    mime_type: str
    size_bytes: int
    visible_to_helper: bool
    valid_until: Optional[date] = None
    uploaded_by: str
    download_url: str
    created_at: Optional[datetime] = None


class DocumentListResponse(BaseModel):
    documents: List[DocumentResponse]
    total_count: int


class DocumentUploadResponse(BaseModel):
    message: str = Field(default="Dokument erfolgreich hochgeladen")
    document: DocumentResponse
