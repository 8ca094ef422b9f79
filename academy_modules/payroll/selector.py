"""
Payroll Formula Selector (``academy_modules.payroll.selector``).

Responsibility
--------------
Given a staff member's employment classification, dispatch to exactly one
of four deduction-formula branches and return the statutory deductions.

Architecture position
---------------------
**Modules layer** -- pure.  Binds a ``PayrollPolicy`` at construction so
the branch logic never reads a literal rate.

Branches
--------
================================  ==============  ===========================================
Classification                    Insurance on    Withholding
================================  ==============  ===========================================
``freelance``                     --              flat rate on gross
``salaried_fixed``                gross           brackets on gross
``salaried_with_overtime``        base pay        brackets on base + flat rate on extra pay
``hourly_parttime``               --              flat rate on gross above the exemption
================================  ==============  ===========================================

Local surtax is always the policy ratio of total withholding.

Failure modes
-------------
* ``UnclassifiedEmploymentError`` for a classification outside the four
  known values.  Never defaulted.
"""

from __future__ import annotations

from academy_kernel.exceptions import UnclassifiedEmploymentError
from academy_kernel.logging_config import get_logger
from academy_modules.payroll.config import PayrollPolicy
from academy_modules.payroll.helpers import (
    calculate_employee_insurance,
    calculate_flat_withholding,
    calculate_local_tax,
    calculate_parttime_withholding,
    calculate_salaried_withholding,
)
from academy_modules.payroll.models import (
    DeductionBreakdown,
    EmploymentClassification,
    StaffMember,
)

logger = get_logger("modules.payroll.selector")


class PayrollFormulaSelector:
    """
    Exhaustive dispatcher from employment classification to deduction formula.

    Contract:
        ``compute_deductions`` is a pure function of the staff member's
        classification, the three pay components and the bound policy.

    Guarantees:
        - Every known classification maps to exactly one branch.
        - All returned amounts are floored integers.
    """

    def __init__(self, policy: PayrollPolicy | None = None):
        self._policy = policy or PayrollPolicy.default()

    @property
    def policy(self) -> PayrollPolicy:
        return self._policy

    def classify(self, staff: StaffMember) -> EmploymentClassification:
        """Resolve the staff member's classification to the closed enum.

        Raises:
            UnclassifiedEmploymentError: if the value is not a known classification.
        """
        value = staff.classification
        if isinstance(value, EmploymentClassification):
            return value
        try:
            return EmploymentClassification(value)
        except ValueError:
            logger.warning(
                "employment_unclassified",
                extra={"staff_id": str(staff.id), "classification": repr(value)},
            )
            raise UnclassifiedEmploymentError(str(staff.id), value) from None

    def compute_deductions(
        self,
        staff: StaffMember,
        base_pay: int,
        extra_pay: int,
        gross_pay: int,
    ) -> DeductionBreakdown:
        """Compute insurance, withholding and local tax for one pay period."""
        classification = self.classify(staff)

        match classification:
            case EmploymentClassification.FREELANCE:
                breakdown = self._freelance(gross_pay)
            case EmploymentClassification.SALARIED_FIXED:
                breakdown = self._salaried_fixed(gross_pay)
            case EmploymentClassification.SALARIED_WITH_OVERTIME:
                breakdown = self._salaried_with_overtime(base_pay, extra_pay)
            case EmploymentClassification.HOURLY_PARTTIME:
                breakdown = self._hourly_parttime(gross_pay)
            case _:
                raise UnclassifiedEmploymentError(str(staff.id), classification)

        logger.debug(
            "deductions_computed",
            extra={
                "staff_id": str(staff.id),
                "classification": classification.value,
                "policy_version": self._policy.version,
                "insurance": breakdown.insurance,
                "withholding_tax": breakdown.withholding_tax,
                "local_tax": breakdown.local_tax,
            },
        )
        return breakdown

    # -- branches ----------------------------------------------------------

    def _with_local_tax(self, insurance: int, withholding: int) -> DeductionBreakdown:
        return DeductionBreakdown(
            insurance=insurance,
            withholding_tax=withholding,
            local_tax=calculate_local_tax(withholding, self._policy),
        )

    def _freelance(self, gross_pay: int) -> DeductionBreakdown:
        withholding = calculate_flat_withholding(gross_pay, self._policy)
        return self._with_local_tax(0, withholding)

    def _salaried_fixed(self, gross_pay: int) -> DeductionBreakdown:
        insurance = calculate_employee_insurance(gross_pay, self._policy)
        withholding = calculate_salaried_withholding(gross_pay, insurance, self._policy)
        return self._with_local_tax(insurance, withholding)

    def _salaried_with_overtime(self, base_pay: int, extra_pay: int) -> DeductionBreakdown:
        insurance = calculate_employee_insurance(base_pay, self._policy)
        base_withholding = calculate_salaried_withholding(base_pay, insurance, self._policy)
        overtime_withholding = calculate_flat_withholding(extra_pay, self._policy)
        return self._with_local_tax(insurance, base_withholding + overtime_withholding)

    def _hourly_parttime(self, gross_pay: int) -> DeductionBreakdown:
        withholding = calculate_parttime_withholding(gross_pay, self._policy)
        return self._with_local_tax(0, withholding)
