"""
Casework Backend: Vacation Model
==================================

What:  `vacations`: a helper's requested absence, optionally naming a
       substitute helper. Created unapproved; approval is a separate action.
"""

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casework.core.vacations import VacationPeriod
from casework.database import Base

if TYPE_CHECKING:
    from casework.models.helper import Helper


class Vacation(Base):
    __tablename__ = "vacations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    helper_id: Mapped[int] = mapped_column(ForeignKey("helpers.id"), nullable=False)
    substitute_id: Mapped[Optional[int]] = mapped_column(ForeignKey("helpers.id"), nullable=True)
    from_date: Mapped[date] = mapped_column(Date, nullable=False)
    to_date: Mapped[date] = mapped_column(Date, nullable=False)
    approved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false"),
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    helper: Mapped["Helper"] = relationship(back_populates="vacations", foreign_keys=[helper_id])
    substitute: Mapped[Optional["Helper"]] = relationship(foreign_keys=[substitute_id])

    # Overlap checks always filter by helper and compare date ranges
    __table_args__ = (
        Index("idx_vacations_helper_dates", "helper_id", "from_date", "to_date"),
    )

    def to_period(self) -> VacationPeriod:
        return VacationPeriod(
            id=self.id,
            helper_id=self.helper_id,
            from_date=self.from_date,
            to_date=self.to_date,
            approved=bool(self.approved),
        )

    def __repr__(self) -> str:
        return (
            f"<Vacation(id={self.id}, helper_id={self.helper_id}, "
            f"{self.from_date}..{self.to_date}, approved={self.approved})>"
        )
