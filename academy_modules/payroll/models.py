"""
Payroll Domain Models (``academy_modules.payroll.models``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of academy payroll:
staff members and their compensation policy, logged work shifts, composed
pay slips, and the summaries built from them.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
the Time Ledger, the Formula Selector, the Pay Slip Composer and
``PayrollService``.  No dependency on the database.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* Monetary amounts are whole currency units (``int``); rates are ``Decimal``.
* ``PaySlip.net_pay == gross_pay - insurance - withholding_tax - local_tax``.

Failure modes
-------------
* Negative ``base_amount`` on a staff member raises ``ValueError``.
* A per-head or per-hour allowance policy without a positive matching rate
  raises ``InvalidAllowancePolicyError``.
* A pay slip whose net pay breaks the deduction identity raises ``ValueError``.
"""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import NamedTuple
from uuid import UUID, uuid4

from academy_kernel.exceptions import InvalidAllowancePolicyError
from academy_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.models")


class EmploymentClassification(Enum):
    """How a staff member is employed, which fixes the deduction formula."""
    FREELANCE = "freelance"
    SALARIED_FIXED = "salaried_fixed"
    SALARIED_WITH_OVERTIME = "salaried_with_overtime"
    HOURLY_PARTTIME = "hourly_parttime"


class AllowanceType(Enum):
    """Allowance models.  At most one is active per staff member."""
    NONE = "none"
    PER_HEAD = "per_head"
    PER_HOUR = "per_hour"


class StaffStatus(Enum):
    """Staff lifecycle.  Records are never deleted, only made inactive."""
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    INACTIVE = "inactive"


class ShiftCategory(Enum):
    """Kinds of logged work."""
    REGULAR = "regular"
    OVERTIME = "overtime"
    CONSULTATION = "consultation"


@dataclass(frozen=True)
class StaffMember:
    """A staff member plus compensation policy.

    ``base_amount`` is a monthly salary or an hourly rate depending on the
    classification.  ``classification`` may arrive as a raw string from the
    caller's store; the Formula Selector resolves it.
    """
    id: UUID
    staff_number: str
    name: str
    classification: EmploymentClassification | str
    base_amount: int
    overtime_rate: int | None = None
    allowance_type: AllowanceType = AllowanceType.NONE
    per_head_rate: Decimal | None = None
    per_hour_rate: Decimal | None = None
    status: StaffStatus = StaffStatus.ACTIVE
    hire_date: date | None = None

    def __post_init__(self):
        if self.base_amount < 0:
            logger.warning(
                "staff_negative_base_amount",
                extra={
                    "staff_id": str(self.id),
                    "staff_number": self.staff_number,
                    "base_amount": self.base_amount,
                },
            )
            raise ValueError("base_amount cannot be negative")

        rate = self.allowance_rate
        if self.allowance_type != AllowanceType.NONE and (rate is None or Decimal(str(rate)) <= 0):
            logger.warning(
                "staff_allowance_rate_missing",
                extra={
                    "staff_id": str(self.id),
                    "allowance_type": self.allowance_type.value,
                    "rate": rate,
                },
            )
            raise InvalidAllowancePolicyError(str(self.id), self.allowance_type.value, rate)

    @property
    def allowance_rate(self) -> Decimal | None:
        """Rate of the active allowance model, ``None`` when there is none."""
        if self.allowance_type == AllowanceType.PER_HEAD:
            return self.per_head_rate
        if self.allowance_type == AllowanceType.PER_HOUR:
            return self.per_hour_rate
        return None

    @property
    def is_active(self) -> bool:
        return self.status != StaffStatus.INACTIVE


@dataclass(frozen=True)
class WorkShift:
    """One logged shift on one calendar day.

    Shifts are immutable.  A correction is a new shift whose
    ``corrects_shift_id`` points at the shift it supersedes.
    """
    id: UUID
    staff_id: UUID
    work_date: date
    start_time: time
    end_time: time
    break_minutes: int = 0
    category: ShiftCategory = ShiftCategory.REGULAR
    note: str = ""
    corrects_shift_id: UUID | None = None


class AllowanceResult(NamedTuple):
    """Allowance amount and its human-readable breakdown."""
    amount: int
    detail: str


@dataclass(frozen=True)
class DeductionBreakdown:
    """Statutory deductions produced by one formula branch."""
    insurance: int
    withholding_tax: int
    local_tax: int

    @property
    def total(self) -> int:
        return self.insurance + self.withholding_tax + self.local_tax


@dataclass(frozen=True)
class PaySlip:
    """A composed monthly pay slip.

    ``id`` is excluded from equality so that composing the same inputs twice
    yields equal slips.
    """
    staff_id: UUID
    year: int
    month: int
    classification: EmploymentClassification
    base_pay: int
    extra_pay: int
    allowance_amount: int
    allowance_detail: str
    gross_pay: int
    insurance: int
    withholding_tax: int
    local_tax: int
    net_pay: int
    policy_version: str
    id: UUID = field(default_factory=uuid4, compare=False)

    def __post_init__(self):
        expected = self.gross_pay - self.insurance - self.withholding_tax - self.local_tax
        if self.net_pay != expected:
            raise ValueError(
                f"net_pay {self.net_pay} does not equal gross minus deductions ({expected})"
            )

    @property
    def total_withheld(self) -> int:
        """Withholding plus local surtax, the amount remitted as income tax."""
        return self.withholding_tax + self.local_tax


@dataclass(frozen=True)
class MonthlyWorkSummary:
    """Worked minutes for one staff member in one month."""
    year: int
    month: int
    total_minutes: int
    minutes_by_category: dict[ShiftCategory, int] = field(default_factory=dict)
    shift_count: int = 0

    def minutes_for(self, category: ShiftCategory) -> int:
        return self.minutes_by_category.get(category, 0)


@dataclass(frozen=True)
class StaffYearTotal:
    """Gross pay and income tax withheld for one staff member over a year."""
    staff_id: UUID
    gross_pay: int
    total_withheld: int
    slip_count: int


@dataclass(frozen=True)
class MonthlyPayTotal:
    """Gross pay and income tax withheld across all staff for one month."""
    month: int
    gross_pay: int
    total_withheld: int
    slip_count: int


@dataclass(frozen=True)
class PayrollYearSummary:
    """Year-level payroll totals across all issued slips."""
    year: int
    slip_count: int
    total_gross: int
    total_withheld: int
    total_insurance: int
    by_staff: tuple[StaffYearTotal, ...] = field(default_factory=tuple)
    by_month: tuple[MonthlyPayTotal, ...] = field(default_factory=tuple)
