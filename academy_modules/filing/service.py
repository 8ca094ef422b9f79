"""
Filing Schedule Service (``academy_modules.filing.service``).

Responsibility
--------------
Persists the statutory filing calendar and applies caller-driven status
changes to individual obligations.

* ``ensure_filing_schedule`` -- generate-once-per-year, then read back.
* ``mark_filed`` / ``mark_paid`` -- forward steps of
  ``FILING_OBLIGATION_WORKFLOW``.
* ``upcoming_obligations`` -- unpaid deadlines near ``today``.

Architecture position
---------------------
**Modules layer** -- service class.  Participates in the caller's
transaction: it flushes, never commits.  Uses a savepoint around the bulk
insert so that a lost generation race does not discard the caller's
other work.

Invariants enforced
-------------------
* At most one obligation per (year, category, period).  A per-year
  in-process lock serialises generation within one process; the
  ``uq_academy_filing_key`` constraint catches everything else.  A losing
  insert rolls back to its savepoint and returns the winner's rows.
* Status only moves ``pending -> filed -> paid``, one step at a time.

Failure modes
-------------
* ``FilingObligationNotFoundError`` -- unknown obligation id.
* ``InvalidStatusTransitionError`` -- any step the workflow does not allow.
* ``InvalidPaidAmountError`` -- negative paid amount.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy_kernel.domain.clock import Clock, SystemClock
from academy_kernel.exceptions import (
    FilingObligationNotFoundError,
    InvalidPaidAmountError,
    InvalidStatusTransitionError,
)
from academy_kernel.logging_config import get_logger
from academy_modules.filing.calendar import build_filing_schedule
from academy_modules.filing.models import FilingObligation, FilingStatus
from academy_modules.filing.orm import FilingObligationModel
from academy_modules.filing.workflows import FILING_OBLIGATION_WORKFLOW

logger = get_logger("modules.filing.service")

_year_locks: dict[int, threading.Lock] = {}
_year_locks_guard = threading.Lock()


def _lock_for_year(year: int) -> threading.Lock:
    with _year_locks_guard:
        lock = _year_locks.get(year)
        if lock is None:
            lock = _year_locks[year] = threading.Lock()
        return lock


class FilingScheduleService:
    """
    Idempotent filing calendar persistence plus obligation status tracking.

    Contract:
        ``ensure_filing_schedule(year)`` returns the same obligations on
        every call for a given year, generating them only on the first.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        system_actor_id: UUID | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._system_actor_id = system_actor_id or UUID(int=0)

    # =========================================================================
    # Schedule generation
    # =========================================================================

    def ensure_filing_schedule(
        self,
        year: int,
        actor_id: UUID | None = None,
    ) -> list[FilingObligation]:
        """
        Return the filing obligations for ``year``, generating them if absent.

        Returns the stored obligations ordered by due date, then category.
        """
        with _lock_for_year(year):
            existing = self._load_schedule(year)
            if existing:
                logger.debug(
                    "filing_schedule_exists",
                    extra={"year": year, "obligation_count": len(existing)},
                )
                return existing

            obligations = build_filing_schedule(year)
            created_by = actor_id or self._system_actor_id

            savepoint = self._session.begin_nested()
            try:
                self._session.add_all(
                    FilingObligationModel.from_dto(o, created_by_id=created_by)
                    for o in obligations
                )
                self._session.flush()
                savepoint.commit()
            except IntegrityError:
                # Another writer generated this year first; keep theirs.
                savepoint.rollback()
                self._session.expire_all()
                logger.warning(
                    "filing_schedule_generation_conflict",
                    extra={"year": year},
                )
                return self._load_schedule(year)

            logger.info(
                "filing_schedule_generated",
                extra={"year": year, "obligation_count": len(obligations)},
            )
            return self._load_schedule(year)

    def list_obligations(
        self,
        year: int,
        status: FilingStatus | None = None,
    ) -> list[FilingObligation]:
        schedule = self._load_schedule(year)
        if status is None:
            return schedule
        return [o for o in schedule if o.status == status]

    def get_obligation(self, obligation_id: UUID) -> FilingObligation:
        return self._load_obligation(obligation_id).to_dto()

    # =========================================================================
    # Status transitions
    # =========================================================================

    def mark_filed(self, obligation_id: UUID, actor_id: UUID) -> FilingObligation:
        """Move an obligation from ``pending`` to ``filed``."""
        orm_obligation = self._load_obligation(obligation_id)
        self._transition(orm_obligation, FilingStatus.FILED, actor_id)
        self._session.flush()
        return orm_obligation.to_dto()

    def mark_paid(
        self,
        obligation_id: UUID,
        amount: int,
        actor_id: UUID,
    ) -> FilingObligation:
        """Move an obligation from ``filed`` to ``paid``, recording the amount."""
        orm_obligation = self._load_obligation(obligation_id)
        if amount < 0:
            logger.warning(
                "filing_paid_amount_negative",
                extra={"obligation_id": str(obligation_id), "amount": amount},
            )
            raise InvalidPaidAmountError(str(obligation_id), amount)

        self._transition(orm_obligation, FilingStatus.PAID, actor_id)
        orm_obligation.paid_amount = amount
        self._session.flush()
        return orm_obligation.to_dto()

    # =========================================================================
    # Queries
    # =========================================================================

    def upcoming_obligations(
        self,
        year: int,
        window_days: int = 45,
        grace_days: int = 3,
    ) -> list[FilingObligation]:
        """
        Unpaid obligations due between ``today - grace_days`` and
        ``today + window_days`` inclusive, soonest first.

        Only reads what is stored; it does not generate the schedule.
        """
        today = self._clock.today()
        earliest = today - timedelta(days=grace_days)
        latest = today + timedelta(days=window_days)

        rows = self._session.execute(
            select(FilingObligationModel)
            .where(FilingObligationModel.year == year)
            .where(FilingObligationModel.status != FilingStatus.PAID.value)
            .where(FilingObligationModel.due_date >= earliest)
            .where(FilingObligationModel.due_date <= latest)
            .order_by(
                FilingObligationModel.due_date,
                FilingObligationModel.category,
                FilingObligationModel.period,
            )
        ).scalars().all()
        return [r.to_dto() for r in rows]

    # =========================================================================
    # Internal
    # =========================================================================

    def _transition(
        self,
        orm_obligation: FilingObligationModel,
        to_status: FilingStatus,
        actor_id: UUID,
    ) -> None:
        from_status = orm_obligation.status
        if not FILING_OBLIGATION_WORKFLOW.can_transition(from_status, to_status.value):
            logger.warning(
                "filing_status_transition_rejected",
                extra={
                    "obligation_id": str(orm_obligation.id),
                    "from_status": from_status,
                    "to_status": to_status.value,
                },
            )
            raise InvalidStatusTransitionError(
                str(orm_obligation.id), from_status, to_status.value,
            )

        orm_obligation.status = to_status.value
        orm_obligation.updated_by_id = actor_id
        logger.info(
            "filing_status_changed",
            extra={
                "obligation_id": str(orm_obligation.id),
                "category": orm_obligation.category,
                "year": orm_obligation.year,
                "period": orm_obligation.period,
                "from_status": from_status,
                "to_status": to_status.value,
            },
        )

    def _load_schedule(self, year: int) -> list[FilingObligation]:
        rows = self._session.execute(
            select(FilingObligationModel)
            .where(FilingObligationModel.year == year)
            .order_by(
                FilingObligationModel.due_date,
                FilingObligationModel.category,
                FilingObligationModel.period,
            )
        ).scalars().all()
        return [r.to_dto() for r in rows]

    def _load_obligation(self, obligation_id: UUID) -> FilingObligationModel:
        orm_obligation = self._session.get(FilingObligationModel, obligation_id)
        if orm_obligation is None:
            logger.warning(
                "filing_obligation_not_found",
                extra={"obligation_id": str(obligation_id)},
            )
            raise FilingObligationNotFoundError(str(obligation_id))
        return orm_obligation
