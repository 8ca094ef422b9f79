"""
Payroll ORM Persistence Models (``academy_modules.payroll.orm``).

Responsibility:
    SQLAlchemy ORM models that persist the frozen dataclass DTOs defined in
    ``academy_modules.payroll.models``.  Each ORM class mirrors a DTO and
    provides ``to_dto()`` / ``from_dto()`` round-trip conversion.

Architecture position:
    **Modules layer** -- persistence companions to the pure DTO models.
    Inherits from ``TrackedBase`` which provides id (UUID PK), created_at,
    updated_at, created_by_id (NOT NULL) and updated_by_id.

Invariants enforced:
    - Monetary fields are whole currency units (BigInteger).
    - Enum fields stored as String(50) containing the enum .value string.
    - Staff members are never deleted; ``status`` moves to ``inactive``.
    - Work shifts and pay slips are insert-only.
"""

from datetime import date, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academy_kernel.db.base import TrackedBase


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


# ---------------------------------------------------------------------------
# StaffMemberModel
# ---------------------------------------------------------------------------

class StaffMemberModel(TrackedBase):
    """
    ORM model for ``StaffMember`` -- identity plus compensation policy.

    Guarantees:
        - ``staff_number`` is unique (uq_academy_staff_number).
        - ``classification`` is stored verbatim; an unknown value survives the
          round trip so the Formula Selector can reject it.
    """

    __tablename__ = "academy_staff_members"

    staff_number: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    classification: Mapped[str] = mapped_column(String(50), nullable=False)
    base_amount: Mapped[int] = mapped_column(nullable=False)
    overtime_rate: Mapped[int | None] = mapped_column(nullable=True)
    allowance_type: Mapped[str] = mapped_column(String(50), nullable=False, default="none")
    per_head_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    per_hour_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    shifts: Mapped[list["WorkShiftModel"]] = relationship(
        back_populates="staff_member",
        foreign_keys="WorkShiftModel.staff_id",
    )

    __table_args__ = (
        UniqueConstraint("staff_number", name="uq_academy_staff_number"),
        Index("idx_academy_staff_status", "status"),
        Index("idx_academy_staff_classification", "classification"),
    )

    def to_dto(self):
        from academy_modules.payroll.models import (
            AllowanceType,
            EmploymentClassification,
            StaffMember,
            StaffStatus,
        )
        try:
            classification = EmploymentClassification(self.classification)
        except ValueError:
            classification = self.classification
        return StaffMember(
            id=self.id,
            staff_number=self.staff_number,
            name=self.name,
            classification=classification,
            base_amount=self.base_amount,
            overtime_rate=self.overtime_rate,
            allowance_type=AllowanceType(self.allowance_type),
            per_head_rate=self.per_head_rate,
            per_hour_rate=self.per_hour_rate,
            status=StaffStatus(self.status),
            hire_date=self.hire_date,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "StaffMemberModel":
        return cls(
            id=dto.id,
            staff_number=dto.staff_number,
            name=dto.name,
            classification=_enum_value(dto.classification),
            base_amount=dto.base_amount,
            overtime_rate=dto.overtime_rate,
            allowance_type=_enum_value(dto.allowance_type),
            per_head_rate=dto.per_head_rate,
            per_hour_rate=dto.per_hour_rate,
            status=_enum_value(dto.status),
            hire_date=dto.hire_date,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<StaffMemberModel {self.staff_number}: {self.name} ({self.classification})>"


# ---------------------------------------------------------------------------
# WorkShiftModel
# ---------------------------------------------------------------------------

class WorkShiftModel(TrackedBase):
    """
    ORM model for ``WorkShift`` -- one logged same-day shift.

    Contract:
        Insert-only.  A correction is a new row whose ``corrects_shift_id``
        references the superseded shift.
    """

    __tablename__ = "academy_work_shifts"

    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("academy_staff_members.id"), nullable=False,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    break_minutes: Mapped[int] = mapped_column(nullable=False, default=0)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="regular")
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    corrects_shift_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("academy_work_shifts.id"), nullable=True,
    )

    staff_member: Mapped["StaffMemberModel"] = relationship(
        back_populates="shifts",
        foreign_keys=[staff_id],
    )

    __table_args__ = (
        Index("idx_academy_shift_staff_date", "staff_id", "work_date"),
        Index("idx_academy_shift_corrects", "corrects_shift_id"),
    )

    def to_dto(self):
        from academy_modules.payroll.models import ShiftCategory, WorkShift
        return WorkShift(
            id=self.id,
            staff_id=self.staff_id,
            work_date=self.work_date,
            start_time=self.start_time,
            end_time=self.end_time,
            break_minutes=self.break_minutes,
            category=ShiftCategory(self.category),
            note=self.note,
            corrects_shift_id=self.corrects_shift_id,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "WorkShiftModel":
        return cls(
            id=dto.id,
            staff_id=dto.staff_id,
            work_date=dto.work_date,
            start_time=dto.start_time,
            end_time=dto.end_time,
            break_minutes=dto.break_minutes,
            category=_enum_value(dto.category),
            note=dto.note,
            corrects_shift_id=dto.corrects_shift_id,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<WorkShiftModel {self.work_date} "
            f"{self.start_time}-{self.end_time} ({self.category})>"
        )


# ---------------------------------------------------------------------------
# PaySlipModel
# ---------------------------------------------------------------------------

class PaySlipModel(TrackedBase):
    """
    ORM model for ``PaySlip`` -- one composed monthly slip.

    Contract:
        Insert-only.  A re-run for the same staff member and period adds a
        new row; reconciling duplicates is the caller's concern.
    """

    __tablename__ = "academy_pay_slips"

    staff_id: Mapped[UUID] = mapped_column(
        ForeignKey("academy_staff_members.id"), nullable=False,
    )
    year: Mapped[int] = mapped_column(nullable=False)
    month: Mapped[int] = mapped_column(nullable=False)
    classification: Mapped[str] = mapped_column(String(50), nullable=False)
    base_pay: Mapped[int] = mapped_column(nullable=False)
    extra_pay: Mapped[int] = mapped_column(nullable=False, default=0)
    allowance_amount: Mapped[int] = mapped_column(nullable=False, default=0)
    allowance_detail: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    gross_pay: Mapped[int] = mapped_column(nullable=False)
    insurance: Mapped[int] = mapped_column(nullable=False, default=0)
    withholding_tax: Mapped[int] = mapped_column(nullable=False, default=0)
    local_tax: Mapped[int] = mapped_column(nullable=False, default=0)
    net_pay: Mapped[int] = mapped_column(nullable=False)
    policy_version: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_academy_pay_slip_period", "year", "month"),
        Index("idx_academy_pay_slip_staff", "staff_id"),
    )

    def to_dto(self):
        from academy_modules.payroll.models import EmploymentClassification, PaySlip
        return PaySlip(
            id=self.id,
            staff_id=self.staff_id,
            year=self.year,
            month=self.month,
            classification=EmploymentClassification(self.classification),
            base_pay=self.base_pay,
            extra_pay=self.extra_pay,
            allowance_amount=self.allowance_amount,
            allowance_detail=self.allowance_detail,
            gross_pay=self.gross_pay,
            insurance=self.insurance,
            withholding_tax=self.withholding_tax,
            local_tax=self.local_tax,
            net_pay=self.net_pay,
            policy_version=self.policy_version,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "PaySlipModel":
        return cls(
            id=dto.id,
            staff_id=dto.staff_id,
            year=dto.year,
            month=dto.month,
            classification=_enum_value(dto.classification),
            base_pay=dto.base_pay,
            extra_pay=dto.extra_pay,
            allowance_amount=dto.allowance_amount,
            allowance_detail=dto.allowance_detail,
            gross_pay=dto.gross_pay,
            insurance=dto.insurance,
            withholding_tax=dto.withholding_tax,
            local_tax=dto.local_tax,
            net_pay=dto.net_pay,
            policy_version=dto.policy_version,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<PaySlipModel {self.year}-{self.month:02d} staff={self.staff_id} "
            f"gross={self.gross_pay} net={self.net_pay}>"
        )
