"""
Casework Backend: Helper Document Storage Service
===================================================

What:  Upload, list, download and delete documents attached to a helper
       (certificates, contracts, police clearance).
How:   Validates extension, size and MIME type, writes the bytes with
       aiofiles under STORAGE_ROOT/helpers/<helper_id>/<uuid><ext> and keeps
       the metadata in `helper_documents`.
Who:   Called by the /api/helpers/{id}/documents route handlers.

Upload checks, cheapest first:
    1. Extension in ALLOWED_EXTENSIONS
    2. Size (Content-Length header, then actual byte count)
    3. MIME type from the file's magic bytes
    4. Write to disk, then insert the row; the file is removed again if the insert fails

Stored filenames are UUIDs, so no user input ends up in a path.
"""

import logging
import os
import uuid
from datetime import date
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from casework.config import settings
from casework.exceptions import (
    CaseworkError,
    DatabaseError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from casework.models.helper import Helper, HelperDocument
from casework.schemas.document import (
    DocumentListResponse,
    DocumentResponse,
    DocumentUploadResponse,
)

logger = logging.getLogger(__name__)

# Extension → canonical MIME type
EXTENSION_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

ALLOWED_EXTENSIONS = set(EXTENSION_MIME_TYPES)
ALLOWED_MIME_TYPES = set(EXTENSION_MIME_TYPES.values())

# libmagic reports Office files by container format on some systems
MIME_ALIASES = {
    "application/zip": ".docx",
    "application/x-ole-storage": ".doc",
    "application/CDFV2": ".doc",
}


def _to_response(document: HelperDocument) -> DocumentResponse:
    return DocumentResponse(
        id=document.id,
        helper_id=document.helper_id,
        name=document.original_name,
        document_type=document.document_type,
        mime_type=document.mime_type,
        size_bytes=document.size_bytes,
        visible_to_helper=bool(document.visible_to_helper),
        valid_until=document.valid_until,
        uploaded_by=document.uploaded_by,
        download_url=f"/api/helpers/{document.helper_id}/documents/{document.id}/download",
        created_at=document.created_at,
    )


class DocumentService:
    """
    Manages the lifecycle of helper documents on disk and in the database.

    Directory structure:
        storage/
        └── helpers/
            └── 17/
                ├── 3f1c...e2.pdf
                └── 9a04...7b.docx
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("DocumentService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """Returns the lower-cased extension or raises ValidationError."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Check the Content-Length header first, then the real byte count,
        since clients can send a wrong header.
        """
        max_mb = settings.max_document_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(message="The uploaded file is empty.", field="file")

        if content_length and content_length > settings.max_document_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_document_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_mime_type(self, file_content: bytes, filename: str) -> str:
        """
        Detect the MIME type from the file header bytes with python-magic.

        Returns:
            The canonical MIME type for the file's extension.

        Raises:
            ValidationError if the content does not match an allowed type.
        """
        ext = Path(filename).suffix.lower()
        try:
            import magic
            mime_type = magic.from_buffer(file_content, mime=True)
        except ImportError:
            # python-magic installed without libmagic
            logger.warning(
                "python-magic not available, falling back to extension-based type detection. "
                "Install libmagic for production security."
            )
            mime_type = EXTENSION_MIME_TYPES.get(ext, "application/octet-stream")
        except Exception as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        expected = EXTENSION_MIME_TYPES.get(ext)
        if expected is not None and (mime_type == expected or MIME_ALIASES.get(mime_type) == ext):
            return expected

        raise ValidationError(
            message=(
                f"File content type '{mime_type}' does not match the '{ext}' extension. "
                f"Allowed are PDF, images (JPEG, PNG, GIF) and Word documents."
            ),
            field="file",
            context={"detected_mime": mime_type, "allowed": sorted(ALLOWED_MIME_TYPES)},
        )

    def _generate_storage_path(self, helper_id: int, extension: str) -> Tuple[Path, str]:
        relative_path = f"helpers/{helper_id}/{uuid.uuid4()}{extension}"
        return self.storage_root / relative_path, relative_path

    def resolve(self, relative_path: str) -> Path:
        """Absolute path of a stored document; refuses paths outside the storage root."""
        path = (self.storage_root / relative_path).resolve()
        if self.storage_root not in path.parents:
            raise FileStorageError(
                message="Invalid document path.",
                context={"path": relative_path},
            )
        return path

    async def store_file(self, content: bytes, helper_id: int, extension: str) -> Tuple[str, str]:
        """Write the bytes to a new UUID-named file. Returns (absolute_path, relative_path)."""
        absolute_path, relative_path = self._generate_storage_path(helper_id, extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save the uploaded document. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", relative_path, len(content))
        return str(absolute_path), relative_path

    async def cleanup_file(self, file_path: str) -> None:
        """
        Best-effort removal of a stored file.

        A missing file is not an error; other OS errors are logged, not raised.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    async def _require_helper(self, db: AsyncSession, helper_id: int) -> Helper:
        helper = await db.get(Helper, helper_id)
        if helper is None:
            raise NotFoundError(resource="helper", resource_id=str(helper_id))
        return helper

    async def upload_document(
        self,
        db: AsyncSession,
        helper_id: int,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
        document_type: str = "other",
        name: Optional[str] = None,
        visible_to_helper: bool = False,
        valid_until: Optional[date] = None,
        uploaded_by: str = "admin",
    ) -> DocumentUploadResponse:
        """
        Validate, store and register one document.

        Raises:
            NotFoundError: helper does not exist (→ 404)
            ValidationError: extension, size or content type rejected (→ 400)
            FileStorageError / DatabaseError: write or insert failed (→ 500)
        """
        await self._require_helper(db, helper_id)

        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        mime_type = self.validate_mime_type(content, filename)

        absolute_path, relative_path = await self.store_file(content, helper_id, ext)

        try:
            document = HelperDocument(
                helper_id=helper_id,
                file_path=relative_path,
                original_name=name or filename,
                document_type=document_type or "other",
                mime_type=mime_type,
                size_bytes=len(content),
                visible_to_helper=visible_to_helper,
                valid_until=valid_until,
                uploaded_by=uploaded_by or "admin",
            )
            db.add(document)
            await db.flush()
        except SQLAlchemyError as e:
            await self.cleanup_file(absolute_path)
            logger.error("Failed to register document for helper %s: %s", helper_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the document. Please try again.",
                context={"helper_id": helper_id},
            )

        logger.info("Document %s uploaded for helper %s", document.id, helper_id)
        return DocumentUploadResponse(document=_to_response(document))

    async def list_documents(
        self,
        db: AsyncSession,
        helper_id: int,
        helper_view: bool = False,
    ) -> DocumentListResponse:
        """
        Documents of one helper, newest first.

        With `helper_view` only documents released to the helper are returned.
        """
        try:
            await self._require_helper(db, helper_id)
            query = select(HelperDocument).where(HelperDocument.helper_id == helper_id)
            if helper_view:
                query = query.where(HelperDocument.visible_to_helper.is_(True))
            result = await db.execute(query.order_by(HelperDocument.created_at.desc()))
            documents = list(result.scalars().all())
        except CaseworkError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error listing documents of helper %s: %s", helper_id, str(e))
            raise DatabaseError(
                message="Could not retrieve documents. Please try again.",
                context={"helper_id": helper_id},
            )

        return DocumentListResponse(
            documents=[_to_response(d) for d in documents],
            total_count=len(documents),
        )

    async def get_document(self, db: AsyncSession, helper_id: int, document_id: int) -> HelperDocument:
        """A document that belongs to `helper_id`; anything else is reported as not found."""
        document = await db.get(HelperDocument, document_id)
        if document is None or document.helper_id != helper_id:
            raise NotFoundError(resource="document", resource_id=str(document_id))
        return document

    async def open_document(
        self,
        db: AsyncSession,
        helper_id: int,
        document_id: int,
    ) -> Tuple[HelperDocument, Path]:
        """Document row plus the absolute path of its file, for streaming downloads."""
        document = await self.get_document(db, helper_id, document_id)
        path = self.resolve(document.file_path)
        if not path.is_file():
            logger.error("Document %s has no file at %s", document_id, document.file_path)
            raise FileStorageError(
                message="The document file is missing from storage.",
                context={"document_id": document_id},
            )
        return document, path

    async def delete_document(self, db: AsyncSession, helper_id: int, document_id: int) -> None:
        """Delete the row, then its file; the file stays if the commit fails."""
        document = await self.get_document(db, helper_id, document_id)
        try:
            await db.delete(document)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not delete the document. Please try again.",
                context={"document_id": document_id},
            )
        await self.cleanup_file(str(self.resolve(document.file_path)))
        logger.info("Document %s of helper %s deleted", document_id, helper_id)


document_service = DocumentService()
