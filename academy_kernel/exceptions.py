"""
Typed exception hierarchy for the academy payroll kernel.

Every error carries a ``code`` class attribute (machine-readable, API-safe)
and keeps its context as attributes, so callers catch by type and read
structured data instead of parsing messages:

    try:
        slip = compose_pay_slip(staff, base_pay, extra_pay, 2026, 3, 12)
    except UnclassifiedEmploymentError as e:
        report(code=e.code, staff_id=e.staff_id, value=e.classification)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    AcademyKernelError (base)
    |
    +-- TimeLedgerError
    |   +-- InvalidShiftError
    |
    +-- PayrollError
    |   +-- InvalidAllowancePolicyError
    |   +-- UnclassifiedEmploymentError
    |   +-- StaffMemberNotFoundError
    |   +-- ShiftNotFoundError
    |   +-- ShiftAlreadyCorrectedError
    |
    +-- FilingError
        +-- FilingObligationNotFoundError
        +-- InvalidStatusTransitionError
        +-- InvalidPaidAmountError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|---------------------------------------
Time ledger     | INVALID_SHIFT                 | end <= start, or break outside [0, span)
----------------|-------------------------------|---------------------------------------
Payroll         | INVALID_ALLOWANCE_POLICY      | per-head/per-hour policy without a rate
                | UNCLASSIFIED_EMPLOYMENT       | classification outside the known four
                | STAFF_MEMBER_NOT_FOUND        | staff ID doesn't exist
                | SHIFT_NOT_FOUND               | shift ID doesn't exist
                | SHIFT_ALREADY_CORRECTED       | shift already superseded by a correction
----------------|-------------------------------|---------------------------------------
Filing          | FILING_OBLIGATION_NOT_FOUND   | obligation ID doesn't exist
                | INVALID_STATUS_TRANSITION     | anything but pending->filed->paid
                | INVALID_PAID_AMOUNT           | negative paid amount

None of these are retryable: the inputs themselves are malformed and the
caller must fix the record before calling again.
"""


class AcademyKernelError(Exception):
    """
    Base exception for all academy kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "ACADEMY_KERNEL_ERROR"


# Time ledger exceptions


class TimeLedgerError(AcademyKernelError):
    """Base exception for time ledger errors."""

    code: str = "TIME_LEDGER_ERROR"


class InvalidShiftError(TimeLedgerError):
    """Shift clock values or break duration violate the same-day contract."""

    code: str = "INVALID_SHIFT"

    def __init__(self, shift_id: str, reason: str):
        self.shift_id = shift_id
        self.reason = reason
        super().__init__(f"Invalid shift {shift_id}: {reason}")


# Payroll exceptions


class PayrollError(AcademyKernelError):
    """Base exception for payroll computation errors."""

    code: str = "PAYROLL_ERROR"


class InvalidAllowancePolicyError(PayrollError):
    """Allowance policy is active but lacks a positive rate."""

    code: str = "INVALID_ALLOWANCE_POLICY"

    def __init__(self, staff_id: str, allowance_type: str, rate: object):
        self.staff_id = staff_id
        self.allowance_type = allowance_type
        self.rate = rate
        super().__init__(
            f"Staff member {staff_id} has allowance policy '{allowance_type}' "
            f"without a positive rate (got {rate!r})"
        )


class UnclassifiedEmploymentError(PayrollError):
    """
    Employment classification is not one of the four known values.

    This is a data-integrity error: the staff record must be fixed.
    """

    code: str = "UNCLASSIFIED_EMPLOYMENT"

    def __init__(self, staff_id: str, classification: object):
        self.staff_id = staff_id
        self.classification = classification
        super().__init__(
            f"Staff member {staff_id} has unknown employment "
            f"classification {classification!r}"
        )


class StaffMemberNotFoundError(PayrollError):
    """Staff member with given ID was not found."""

    code: str = "STAFF_MEMBER_NOT_FOUND"

    def __init__(self, staff_id: str):
        self.staff_id = staff_id
        super().__init__(f"Staff member not found: {staff_id}")


class ShiftNotFoundError(PayrollError):
    """Work shift with given ID was not found."""

    code: str = "SHIFT_NOT_FOUND"

    def __init__(self, shift_id: str):
        self.shift_id = shift_id
        super().__init__(f"Work shift not found: {shift_id}")


class ShiftAlreadyCorrectedError(PayrollError):
    """
    Shift already has a correction.

    Corrections chain: the next one must target the latest shift,
    ``correction_id``, not the superseded original.
    """

    code: str = "SHIFT_ALREADY_CORRECTED"

    def __init__(self, shift_id: str, correction_id: str):
        self.shift_id = shift_id
        self.correction_id = correction_id
        super().__init__(
            f"Work shift {shift_id} is already corrected by {correction_id}"
        )


# Filing exceptions


class FilingError(AcademyKernelError):
    """Base exception for statutory filing errors."""

    code: str = "FILING_ERROR"


class FilingObligationNotFoundError(FilingError):
    """Filing obligation with given ID was not found."""

    code: str = "FILING_OBLIGATION_NOT_FOUND"

    def __init__(self, obligation_id: str):
        self.obligation_id = obligation_id
        super().__init__(f"Filing obligation not found: {obligation_id}")


class InvalidStatusTransitionError(FilingError):
    """Status change is not an allowed step of the obligation lifecycle."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, obligation_id: str, from_status: str, to_status: str):
        self.obligation_id = obligation_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Filing obligation {obligation_id} cannot move "
            f"from '{from_status}' to '{to_status}'"
        )


class InvalidPaidAmountError(FilingError):
    """Paid amount recorded against an obligation is negative."""

    code: str = "INVALID_PAID_AMOUNT"

    def __init__(self, obligation_id: str, amount: int):
        self.obligation_id = obligation_id
        self.amount = amount
        super().__init__(
            f"Paid amount for filing obligation {obligation_id} "
            f"must be non-negative, got {amount}"
        )
