"""
Pay Slip Composer (``academy_modules.payroll.composer``).

Aggregates base pay, extra pay and allowance into gross pay, applies the
deduction formula chosen by ``PayrollFormulaSelector``, and returns the
``PaySlip``.  Pure: persistence belongs to ``PayrollService`` or the caller.
"""

from __future__ import annotations

from decimal import Decimal

from academy_kernel.logging_config import get_logger
from academy_modules.payroll.helpers import compute_allowance
from academy_modules.payroll.models import PaySlip, StaffMember
from academy_modules.payroll.selector import PayrollFormulaSelector

logger = get_logger("modules.payroll.composer")

_DEFAULT_SELECTOR = PayrollFormulaSelector()


def compose_pay_slip(
    staff: StaffMember,
    base_pay: int,
    extra_pay: int,
    year: int,
    month: int,
    allowance_quantity: Decimal | int | float | str,
    *,
    selector: PayrollFormulaSelector | None = None,
) -> PaySlip:
    """
    Compose one month's pay slip for ``staff``.

    Steps: allowance -> gross -> classification branch -> net.

    Raises:
        InvalidAllowancePolicyError: allowance policy lacks its rate.
        UnclassifiedEmploymentError: unknown employment classification.
        ValueError: ``month`` outside 1..12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")

    selector = selector or _DEFAULT_SELECTOR
    classification = selector.classify(staff)

    allowance = compute_allowance(staff, allowance_quantity)
    gross_pay = base_pay + extra_pay + allowance.amount
    deductions = selector.compute_deductions(staff, base_pay, extra_pay, gross_pay)
    net_pay = gross_pay - deductions.total

    slip = PaySlip(
        staff_id=staff.id,
        year=year,
        month=month,
        classification=classification,
        base_pay=base_pay,
        extra_pay=extra_pay,
        allowance_amount=allowance.amount,
        allowance_detail=allowance.detail,
        gross_pay=gross_pay,
        insurance=deductions.insurance,
        withholding_tax=deductions.withholding_tax,
        local_tax=deductions.local_tax,
        net_pay=net_pay,
        policy_version=selector.policy.version,
    )

    logger.info(
        "pay_slip_composed",
        extra={
            "staff_id": str(staff.id),
            "period": f"{year}-{month:02d}",
            "classification": classification.value,
            "gross_pay": gross_pay,
            "net_pay": net_pay,
        },
    )
    return slip
