"""
Payroll Module (``academy_modules.payroll``).

Responsibility
--------------
Staff compensation for the academy: employment classifications, work
shifts, allowance models, the four deduction-formula branches and the
monthly pay slip.

Architecture position
---------------------
**Modules layer** -- value objects and the policy table are exported here.
The Formula Selector, Pay Slip Composer and ``PayrollService`` are imported
from their own modules so that the Time Ledger engine can depend on the
models without pulling in persistence.

Failure modes
-------------
* ``InvalidAllowancePolicyError`` -- allowance policy without its rate.
* ``UnclassifiedEmploymentError`` -- classification outside the known four.
"""

from academy_modules.payroll.config import PayrollPolicy
from academy_modules.payroll.models import (
    AllowanceResult,
    AllowanceType,
    DeductionBreakdown,
    EmploymentClassification,
    MonthlyPayTotal,
    MonthlyWorkSummary,
    PayrollYearSummary,
    PaySlip,
    ShiftCategory,
    StaffMember,
    StaffStatus,
    StaffYearTotal,
    WorkShift,
)

__all__ = [
    "AllowanceResult",
    "AllowanceType",
    "DeductionBreakdown",
    "EmploymentClassification",
    "MonthlyPayTotal",
    "MonthlyWorkSummary",
    "PayrollPolicy",
    "PayrollYearSummary",
    "PaySlip",
    "ShiftCategory",
    "StaffMember",
    "StaffStatus",
    "StaffYearTotal",
    "WorkShift",
]
