"""
Payroll Service (``academy_modules.payroll.service``).

Responsibility
--------------
Persistence-facing orchestration for academy payroll: staff registration
and policy revision, shift logging and correction, pay slip issuance, and
year-level reporting.  All calculations are delegated to the pure layers
(Time Ledger, Pay Slip Composer, helpers); this service only loads DTOs,
calls them, and stores the results.

Architecture position
---------------------
**Modules layer** -- service class.  Receives a SQLAlchemy ``Session``
from the caller and participates in the caller's transaction: it adds and
flushes, it never commits or rolls back.

Invariants enforced
-------------------
* Staff members are never deleted; ``deactivate_staff`` sets ``inactive``.
* Shifts are validated through ``worked_minutes`` before being stored and
  are insert-only.  A correction is a new shift row pointing at the one it
  supersedes.  Each shift is corrected at most once; a further correction
  targets the latest row of the chain.
* Pay slips are insert-only; issuing twice for a period stores two slips.
* Every write records ``created_by_id`` / ``updated_by_id``.

Failure modes
-------------
* ``StaffMemberNotFoundError`` / ``ShiftNotFoundError`` for unknown ids.
* ``ShiftAlreadyCorrectedError`` when a superseded shift is corrected again.
* ``InvalidShiftError`` from the Time Ledger for malformed shifts.
* ``InvalidAllowancePolicyError`` / ``UnclassifiedEmploymentError`` from
  the composer.
* ``ValueError`` when a correction targets another staff member's shift
  or ``revise_staff`` names an unknown field.

Usage
-----
    service = PayrollService(session)
    service.register_staff(staff, actor_id=actor_id)
    slip = service.issue_pay_slip(
        staff.id, base_pay=2_500_000, extra_pay=0, year=2026, month=3,
        allowance_quantity=0, actor_id=actor_id,
    )
    session.commit()
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from academy_engines.time_ledger import summarize_month, worked_minutes
from academy_kernel.exceptions import (
    ShiftAlreadyCorrectedError,
    ShiftNotFoundError,
    StaffMemberNotFoundError,
)
from academy_kernel.logging_config import get_logger
from academy_modules.payroll.composer import compose_pay_slip
from academy_modules.payroll.helpers import summarize_pay_slips
from academy_modules.payroll.models import (
    MonthlyWorkSummary,
    PayrollYearSummary,
    PaySlip,
    StaffMember,
    StaffStatus,
    WorkShift,
)
from academy_modules.payroll.orm import PaySlipModel, StaffMemberModel, WorkShiftModel
from academy_modules.payroll.selector import PayrollFormulaSelector

logger = get_logger("modules.payroll.service")

_REVISABLE_FIELDS = frozenset({
    "name",
    "classification",
    "base_amount",
    "overtime_rate",
    "allowance_type",
    "per_head_rate",
    "per_hour_rate",
    "status",
})


class PayrollService:
    """
    Orchestrates staff, shift and pay slip persistence.

    Contract:
        Every public method either returns a DTO (or list of DTOs) or raises.
        Writes are flushed so generated ids and constraints are checked
        immediately; the caller decides when to commit.
    """

    def __init__(
        self,
        session: Session,
        selector: PayrollFormulaSelector | None = None,
    ):
        self._session = session
        self._selector = selector or PayrollFormulaSelector()

    # =========================================================================
    # Staff
    # =========================================================================

    def register_staff(self, staff: StaffMember, actor_id: UUID) -> StaffMember:
        """Persist a newly hired staff member."""
        orm_staff = StaffMemberModel.from_dto(staff, created_by_id=actor_id)
        self._session.add(orm_staff)
        self._session.flush()

        logger.info("staff_registered", extra={
            "staff_id": str(staff.id),
            "staff_number": staff.staff_number,
            "classification": getattr(staff.classification, "value", staff.classification),
        })
        return orm_staff.to_dto()

    def get_staff(self, staff_id: UUID) -> StaffMember:
        """Load a staff member by id.

        Raises:
            StaffMemberNotFoundError: no such staff member.
        """
        return self._load_staff(staff_id).to_dto()

    def list_staff(self, include_inactive: bool = False) -> list[StaffMember]:
        query = self._session.query(StaffMemberModel)
        if not include_inactive:
            query = query.filter(StaffMemberModel.status != StaffStatus.INACTIVE.value)
        return [m.to_dto() for m in query.order_by(StaffMemberModel.staff_number)]

    def revise_staff(self, staff_id: UUID, actor_id: UUID, **changes) -> StaffMember:
        """
        Apply a compensation-policy revision (rates, role, classification).

        Historical pay slips are unaffected: they carry their own figures.
        """
        unknown = set(changes) - _REVISABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot revise staff fields: {sorted(unknown)}")

        orm_staff = self._load_staff(staff_id)
        # Build the revised DTO first so its validation runs before any write.
        revised = replace(orm_staff.to_dto(), **changes)
        for name in changes:
            value = getattr(revised, name)
            setattr(orm_staff, name, getattr(value, "value", value))
        orm_staff.updated_by_id = actor_id
        self._session.flush()

        logger.info("staff_revised", extra={
            "staff_id": str(staff_id),
            "fields": sorted(changes),
        })
        return orm_staff.to_dto()

    def deactivate_staff(self, staff_id: UUID, actor_id: UUID) -> StaffMember:
        """Move a staff member to ``inactive``.  Their slips remain valid."""
        orm_staff = self._load_staff(staff_id)
        orm_staff.status = StaffStatus.INACTIVE.value
        orm_staff.updated_by_id = actor_id
        self._session.flush()

        logger.info("staff_deactivated", extra={"staff_id": str(staff_id)})
        return orm_staff.to_dto()

    # =========================================================================
    # Shifts
    # =========================================================================

    def record_shift(self, shift: WorkShift, actor_id: UUID) -> WorkShift:
        """
        Validate and persist one logged shift.

        Raises:
            StaffMemberNotFoundError: the shift's staff member is unknown.
            InvalidShiftError: the shift fails Time Ledger validation.
        """
        self._load_staff(shift.staff_id)
        minutes = worked_minutes(shift)

        orm_shift = WorkShiftModel.from_dto(shift, created_by_id=actor_id)
        self._session.add(orm_shift)
        self._session.flush()

        logger.info("shift_recorded", extra={
            "shift_id": str(shift.id),
            "staff_id": str(shift.staff_id),
            "work_date": shift.work_date,
            "category": shift.category.value,
            "worked_minutes": minutes,
        })
        return orm_shift.to_dto()

    def record_correction(
        self,
        original_shift_id: UUID,
        corrected: WorkShift,
        actor_id: UUID,
    ) -> WorkShift:
        """
        Record ``corrected`` as the replacement for an earlier shift.

        The original row is left untouched; the new row's
        ``corrects_shift_id`` links it to the shift it supersedes.

        Raises:
            ShiftNotFoundError: the original shift does not exist.
            ShiftAlreadyCorrectedError: the original already has a correction;
                correct the latest shift in the chain instead.
            ValueError: the corrected shift belongs to another staff member.
            InvalidShiftError: the corrected shift is malformed.
        """
        orm_original = (
            self._session.query(WorkShiftModel)
            .filter_by(id=original_shift_id)
            .first()
        )
        if orm_original is None:
            raise ShiftNotFoundError(str(original_shift_id))
        if orm_original.staff_id != corrected.staff_id:
            raise ValueError(
                f"Correction for shift {original_shift_id} names staff "
                f"{corrected.staff_id}, original belongs to {orm_original.staff_id}"
            )

        existing = (
            self._session.query(WorkShiftModel)
            .filter_by(corrects_shift_id=original_shift_id)
            .first()
        )
        if existing is not None:
            logger.warning("shift_already_corrected", extra={
                "original_shift_id": str(original_shift_id),
                "correction_id": str(existing.id),
            })
            raise ShiftAlreadyCorrectedError(str(original_shift_id), str(existing.id))

        replacement = replace(corrected, corrects_shift_id=original_shift_id)
        worked_minutes(replacement)

        orm_shift = WorkShiftModel.from_dto(replacement, created_by_id=actor_id)
        self._session.add(orm_shift)
        self._session.flush()

        logger.info("shift_corrected", extra={
            "original_shift_id": str(original_shift_id),
            "shift_id": str(replacement.id),
            "staff_id": str(replacement.staff_id),
            "note": replacement.note,
        })
        return orm_shift.to_dto()

    def list_shifts(self, staff_id: UUID) -> list[WorkShift]:
        """All shifts for a staff member, superseded ones included."""
        rows = (
            self._session.query(WorkShiftModel)
            .filter_by(staff_id=staff_id)
            .order_by(WorkShiftModel.work_date, WorkShiftModel.start_time)
            .all()
        )
        return [r.to_dto() for r in rows]

    def summarize_month(self, staff_id: UUID, year: int, month: int) -> MonthlyWorkSummary:
        """Worked-minute totals for one staff member and month."""
        self._load_staff(staff_id)
        return summarize_month(self.list_shifts(staff_id), year, month)

    # =========================================================================
    # Pay slips
    # =========================================================================

    def issue_pay_slip(
        self,
        staff_id: UUID,
        base_pay: int,
        extra_pay: int,
        year: int,
        month: int,
        allowance_quantity: Decimal | int | float | str,
        actor_id: UUID,
    ) -> PaySlip:
        """
        Compose and persist one month's pay slip for a staff member.

        Raises:
            StaffMemberNotFoundError: unknown staff member.
            InvalidAllowancePolicyError: allowance policy lacks its rate.
            UnclassifiedEmploymentError: unknown employment classification.
        """
        staff = self.get_staff(staff_id)
        slip = compose_pay_slip(
            staff, base_pay, extra_pay, year, month, allowance_quantity,
            selector=self._selector,
        )

        orm_slip = PaySlipModel.from_dto(slip, created_by_id=actor_id)
        self._session.add(orm_slip)
        self._session.flush()

        logger.info("pay_slip_issued", extra={
            "pay_slip_id": str(slip.id),
            "staff_id": str(staff_id),
            "pay_period": f"{year}-{month:02d}",
            "gross_pay": slip.gross_pay,
            "net_pay": slip.net_pay,
            "policy_version": slip.policy_version,
        })
        return slip

    def list_pay_slips(self, year: int, staff_id: UUID | None = None) -> list[PaySlip]:
        query = self._session.query(PaySlipModel).filter(PaySlipModel.year == year)
        if staff_id is not None:
            query = query.filter(PaySlipModel.staff_id == staff_id)
        rows = query.order_by(PaySlipModel.month, PaySlipModel.created_at).all()
        return [r.to_dto() for r in rows]

    def summarize_year(self, year: int) -> PayrollYearSummary:
        """Gross, withheld and insurance totals over all slips of ``year``."""
        summary = summarize_pay_slips(self.list_pay_slips(year), year)
        logger.info("payroll_year_summarized", extra={
            "year": year,
            "slip_count": summary.slip_count,
            "total_gross": summary.total_gross,
        })
        return summary

    # =========================================================================
    # Internal
    # =========================================================================

    def _load_staff(self, staff_id: UUID) -> StaffMemberModel:
        orm_staff = self._session.query(StaffMemberModel).filter_by(id=staff_id).first()
        if orm_staff is None:
            logger.warning("staff_member_not_found", extra={"staff_id": str(staff_id)})
            raise StaffMemberNotFoundError(str(staff_id))
        return orm_staff
