"""
Casework Backend: Report and Invoice Models
=============================================

What:  `reports`: written progress reports for a case (sent to the youth-welfare office).
       `invoices`: outgoing invoices for a case's hours, numbered R-<year>-<nnnn>.
"""

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casework.database import Base

if TYPE_CHECKING:
    from casework.models.case import Case


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    case_id: Mapped[int] = mapped_column(ForeignKey("cases.id"), nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # entwurf → final → uebermittelt
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="entwurf")
    total_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    visible_to_youth_office: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    case: Mapped["Case"] = relationship(back_populates="reports")


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    case_id: Mapped[int] = mapped_column(ForeignKey("cases.id"), nullable=False, index=True)
    invoice_number: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    work_hours: Mapped[float] = mapped_column(Float, nullable=False)
    service_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hourly_rate: Mapped[float] = mapped_column(Float, nullable=False)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)

    # erstellt → gesendet → bezahlt
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="erstellt")
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    case: Mapped["Case"] = relationship(back_populates="invoices")
