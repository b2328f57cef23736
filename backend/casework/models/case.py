"""
Casework Backend: Case Models
===============================

What:  `cases`: a client (child or family) supported by one or more helpers.
       `helper_assignments`: which helper works on which case, and whether
       that assignment is still running.

Status values are stored in German, as the office uses them:
    offen → in_bearbeitung → abgeschlossen   (plus abgelehnt, wartend, storniert)
"""

import enum
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casework.database import Base

if TYPE_CHECKING:
    from casework.models.billing import Invoice, Report
    from casework.models.helper import Helper
    from casework.models.service_entry import ServiceEntry


class CaseStatus(str, enum.Enum):
    OPEN = "offen"
    IN_PROGRESS = "in_bearbeitung"
    CLOSED = "abgeschlossen"
    REJECTED = "abgelehnt"
    WAITING = "wartend"
    CANCELLED = "storniert"


class Case(Base):
    __tablename__ = "cases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # F-<year>-<nnn>
    case_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    school: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    first_contact_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=CaseStatus.OPEN.value,
        server_default=text("'offen'"),
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    assignments: Mapped[List["HelperAssignment"]] = relationship(back_populates="case")
    services: Mapped[List["ServiceEntry"]] = relationship(back_populates="case")
    reports: Mapped[List["Report"]] = relationship(back_populates="case")
    invoices: Mapped[List["Invoice"]] = relationship(back_populates="case")

    @property
    def client_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Case(id={self.id}, number='{self.case_number}', status='{self.status}')>"


class HelperAssignment(Base):
    __tablename__ = "helper_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    helper_id: Mapped[int] = mapped_column(ForeignKey("helpers.id"), nullable=False, index=True)
    case_id: Mapped[int] = mapped_column(ForeignKey("cases.id"), nullable=False, index=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    helper: Mapped["Helper"] = relationship(back_populates="assignments")
    case: Mapped["Case"] = relationship(back_populates="assignments")

    @property
    def counts_as_active(self) -> bool:
        """Running assignment on a case that is actually being worked on."""
        return bool(self.active) and self.case is not None and self.case.status == CaseStatus.IN_PROGRESS.value
