"""
Casework Backend: Helper Models
=================================

What:  `helpers`: social-work staff assignable to cases.
       `helper_documents`: files a helper or the office uploaded for that helper
       (certificates, contracts, police clearance).
"""

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casework.database import Base

if TYPE_CHECKING:
    from casework.models.case import HelperAssignment
    from casework.models.service_entry import ServiceEntry
    from casework.models.vacation import Vacation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Helper(Base):
    __tablename__ = "helpers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    highest_degree: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Comma-separated, as entered in the helper form
    qualifications: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    assignments: Mapped[List["HelperAssignment"]] = relationship(back_populates="helper")
    services: Mapped[List["ServiceEntry"]] = relationship(back_populates="helper")
    vacations: Mapped[List["Vacation"]] = relationship(
        back_populates="helper",
        foreign_keys="Vacation.helper_id",
    )
    documents: Mapped[List["HelperDocument"]] = relationship(
        back_populates="helper",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Helper(id={self.id}, name='{self.full_name}')>"


class HelperDocument(Base):
    __tablename__ = "helper_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    helper_id: Mapped[int] = mapped_column(
        ForeignKey("helpers.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    # Relative to STORAGE_ROOT: helpers/<helper_id>/<uuid>.<ext>
    file_path: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_type: Mapped[str] = mapped_column(String(50), nullable=False, default="other")
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)
    visible_to_helper: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    valid_until: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    uploaded_by: Mapped[str] = mapped_column(String(100), nullable=False, default="admin")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    helper: Mapped["Helper"] = relationship(back_populates="documents")

    def __repr__(self) -> str:
        return f"<HelperDocument(id={self.id}, helper_id={self.helper_id}, type='{self.document_type}')>"
