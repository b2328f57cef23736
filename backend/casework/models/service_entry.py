"""
Casework Backend: Service Entry Model
=======================================

What:  `service_entries`: one billable activity a helper performed for a case,
       logged as a start/end timestamp pair.

Approval:
    approved = True                         → counts towards case/helper hours
    approved = False, approved_by is NULL   → submitted, waiting for review
    approved = False, approved_by is set    → rejected
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casework.core.hours import ServiceInterval
from casework.database import Base

if TYPE_CHECKING:
    from casework.models.case import Case
    from casework.models.helper import Helper


class ServiceEntry(Base):
    __tablename__ = "service_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    case_id: Mapped[int] = mapped_column(ForeignKey("cases.id"), nullable=False, index=True)
    helper_id: Mapped[int] = mapped_column(ForeignKey("helpers.id"), nullable=False, index=True)
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    service_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    approved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false"),
    )
    approved_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    case: Mapped["Case"] = relationship(back_populates="services")
    helper: Mapped["Helper"] = relationship(back_populates="services")

    __table_args__ = (
        Index("idx_service_entries_start_time", "start_time"),
    )

    def to_interval(self) -> ServiceInterval:
        return ServiceInterval(start=self.start_time, end=self.end_time, approved=bool(self.approved))

    def __repr__(self) -> str:
        return f"<ServiceEntry(id={self.id}, case_id={self.case_id}, approved={self.approved})>"
