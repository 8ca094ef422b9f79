"""
Filing ORM Persistence Models (``academy_modules.filing.orm``).

Responsibility:
    SQLAlchemy ORM model persisting ``FilingObligation`` with
    ``to_dto()`` / ``from_dto()`` round-trip conversion.

Invariants enforced:
    - One row per (year, category, period): ``uq_academy_filing_key``.
      Concurrent schedule generation for the same year collides here.
    - Enum fields stored as String(50) containing the enum .value string.
    - ``paid_amount`` is whole currency units (BigInteger).
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Date, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from academy_kernel.db.base import TrackedBase


class FilingObligationModel(TrackedBase):
    """
    ORM model for ``FilingObligation``.

    Contract:
        Created in bulk per year; afterwards only ``status`` and
        ``paid_amount`` change.
    """

    __tablename__ = "academy_filing_obligations"

    year: Mapped[int] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    period: Mapped[int] = mapped_column(nullable=False)
    month: Mapped[int | None] = mapped_column(nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
    paid_amount: Mapped[int | None] = mapped_column(nullable=True)
    description: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("year", "category", "period", name="uq_academy_filing_key"),
        Index("idx_academy_filing_due", "due_date"),
        Index("idx_academy_filing_status", "status"),
    )

    def to_dto(self):
        from academy_modules.filing.models import (
            FilingCategory,
            FilingObligation,
            FilingStatus,
        )
        return FilingObligation(
            id=self.id,
            year=self.year,
            category=FilingCategory(self.category),
            period=self.period,
            month=self.month,
            due_date=self.due_date,
            status=FilingStatus(self.status),
            paid_amount=self.paid_amount,
            description=self.description,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "FilingObligationModel":
        return cls(
            id=dto.id,
            year=dto.year,
            category=dto.category.value,
            period=dto.period,
            month=dto.month,
            due_date=dto.due_date,
            status=dto.status.value,
            paid_amount=dto.paid_amount,
            description=dto.description,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<FilingObligationModel {self.year} {self.category}#{self.period} "
            f"due={self.due_date} ({self.status})>"
        )
