"""
Payroll Helpers (``academy_modules.payroll.helpers``).

Responsibility
--------------
Pure calculation functions for the allowance models and for each statutory
deduction formula: employee-side insurance, bracketed salaried withholding,
flat 3.3% withholding, the part-time exemption, and the local surtax.
Also the year-level aggregation over issued pay slips.

Architecture position
---------------------
**Modules layer** -- pure helper functions.  No I/O, no session, no
clock, no database access.  Called by ``PayrollFormulaSelector``, the
Pay Slip Composer, or from tests.

Invariants enforced
-------------------
* Monetary inputs and outputs are whole currency units (``int``).
* Every intermediate product is floored with exact ``Decimal`` arithmetic,
  never binary floating point.  Allowances alone round half toward
  +infinity, so halves round up for negative quantities too.
* Every constant comes from a ``PayrollPolicy``; none are inline.

Failure modes
-------------
* ``InvalidAllowancePolicyError`` when a per-head / per-hour policy has no
  positive rate.  Raised before any arithmetic.
* Allowance quantity is NOT validated: zero or negative quantities are
  accepted and scale the amount proportionally.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_FLOOR, ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from uuid import UUID

from academy_kernel.exceptions import InvalidAllowancePolicyError
from academy_kernel.logging_config import get_logger
from academy_modules.payroll.config import PayrollPolicy
from academy_modules.payroll.models import (
    AllowanceResult,
    AllowanceType,
    MonthlyPayTotal,
    PayrollYearSummary,
    PaySlip,
    StaffMember,
    StaffYearTotal,
)

logger = get_logger("modules.payroll.helpers")

_ALLOWANCE_UNITS = {
    AllowanceType.PER_HEAD: "persons",
    AllowanceType.PER_HOUR: "hours",
}


def floor_amount(value: Decimal) -> int:
    """Floor a Decimal to whole currency units."""
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def round_half_toward_positive(value: Decimal) -> int:
    """Round to whole units with halves going toward +infinity (-2.5 -> -2)."""
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return int(value.to_integral_value(rounding=rounding))


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _format_number(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


# ---------------------------------------------------------------------------
# Allowance Calculator
# ---------------------------------------------------------------------------


def compute_allowance(
    staff: StaffMember,
    quantity: Decimal | int | float | str,
) -> AllowanceResult:
    """
    Convert a usage quantity into an allowance under the staff member's policy.

    ``quantity`` is a student headcount for ``per_head`` and worked hours for
    ``per_hour``; the caller supplies it and it is trusted as-is.

    Preconditions:
        - If ``staff.allowance_type`` is ``PER_HEAD`` / ``PER_HOUR`` the
          matching rate is positive.
    Postconditions:
        - ``NONE`` -> ``(0, "")``.
        - Otherwise ``amount = round_half_toward_positive(quantity * rate)`` and
          ``detail = "{quantity} persons × {rate}"`` (or ``hours``).
    Raises:
        InvalidAllowancePolicyError: active policy without a positive rate.
    """
    allowance_type = staff.allowance_type
    if allowance_type == AllowanceType.NONE:
        return AllowanceResult(0, "")

    rate = (
        staff.per_head_rate
        if allowance_type == AllowanceType.PER_HEAD
        else staff.per_hour_rate
    )
    if rate is None or _to_decimal(rate) <= 0:
        logger.warning(
            "allowance_policy_missing_rate",
            extra={
                "staff_id": str(staff.id),
                "allowance_type": allowance_type.value,
                "rate": rate,
            },
        )
        raise InvalidAllowancePolicyError(str(staff.id), allowance_type.value, rate)

    rate = _to_decimal(rate)
    qty = _to_decimal(quantity)
    amount = round_half_toward_positive(qty * rate)
    detail = (
        f"{_format_number(qty)} {_ALLOWANCE_UNITS[allowance_type]} × "
        f"{_format_number(rate)}"
    )
    return AllowanceResult(amount, detail)


# ---------------------------------------------------------------------------
# Deduction formulas
# ---------------------------------------------------------------------------


def calculate_employee_insurance(base: int, policy: PayrollPolicy) -> int:
    """
    Employee-side statutory insurance on ``base``.

    ``floor(base * (pension + health + health * long_term_care + employment))``
    -- a single floor over the combined rate, not a sum of floors.
    """
    return floor_amount(Decimal(base) * policy.insurance_rate)


def calculate_salaried_withholding(
    base: int,
    insurance: int,
    policy: PayrollPolicy,
) -> int:
    """
    Bracketed withholding on salaried pay.

    ``taxable = max(0, base - insurance - earned_income_deduction)``;
    below ``bracket_threshold`` the low rate applies, at or above it the
    high rate less the bracket offset.
    """
    taxable = max(0, base - insurance - policy.earned_income_deduction)
    if taxable < policy.bracket_threshold:
        return floor_amount(Decimal(taxable) * policy.low_bracket_rate)
    return floor_amount(
        Decimal(taxable) * policy.high_bracket_rate - policy.high_bracket_offset
    )


def calculate_flat_withholding(amount: int, policy: PayrollPolicy) -> int:
    """Flat-rate (3.3%) withholding on ``amount``."""
    return floor_amount(Decimal(amount) * policy.flat_withholding_rate)


def calculate_parttime_withholding(gross: int, policy: PayrollPolicy) -> int:
    """Flat withholding on the part of ``gross`` above the exemption threshold."""
    taxable = max(0, gross - policy.parttime_exemption_threshold)
    return calculate_flat_withholding(taxable, policy)


def calculate_local_tax(withholding: int, policy: PayrollPolicy) -> int:
    """Local surtax: a fixed ratio of the withholding amount."""
    return floor_amount(Decimal(withholding) * policy.local_tax_ratio)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def summarize_pay_slips(slips: Iterable[PaySlip], year: int) -> PayrollYearSummary:
    """
    Year totals over issued slips: gross, income tax withheld (withholding
    plus local surtax), employee insurance, per-staff gross/withheld, and
    per-month gross/withheld.

    Slips from other years are ignored.  Staff appear in first-seen order;
    months ascend and only months with slips are listed.
    """
    year_slips = [s for s in slips if s.year == year]

    per_staff: dict[UUID, list[PaySlip]] = {}
    for slip in year_slips:
        per_staff.setdefault(slip.staff_id, []).append(slip)

    by_staff = tuple(
        StaffYearTotal(
            staff_id=staff_id,
            gross_pay=sum(s.gross_pay for s in staff_slips),
            total_withheld=sum(s.total_withheld for s in staff_slips),
            slip_count=len(staff_slips),
        )
        for staff_id, staff_slips in per_staff.items()
    )

    per_month: dict[int, list[PaySlip]] = {}
    for slip in year_slips:
        per_month.setdefault(slip.month, []).append(slip)

    by_month = tuple(
        MonthlyPayTotal(
            month=month,
            gross_pay=sum(s.gross_pay for s in per_month[month]),
            total_withheld=sum(s.total_withheld for s in per_month[month]),
            slip_count=len(per_month[month]),
        )
        for month in sorted(per_month)
    )

    return PayrollYearSummary(
        year=year,
        slip_count=len(year_slips),
        total_gross=sum(s.gross_pay for s in year_slips),
        total_withheld=sum(s.total_withheld for s in year_slips),
        total_insurance=sum(s.insurance for s in year_slips),
        by_staff=by_staff,
        by_month=by_month,
    )
