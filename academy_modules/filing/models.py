"""
Filing Domain Models.

Responsibility:
    Frozen dataclass DTOs for the academy's statutory filing calendar:
    the filing categories, the obligation lifecycle states, and the
    ``FilingObligation`` record itself.

Architecture:
    academy_modules -- Thin orchestration layer (this layer).
    Pure data containers with no I/O and no ORM coupling.

Invariants:
    - All models are ``frozen=True`` (immutable after construction).
    - Paid amounts are whole currency units (``int``), never negative.
    - ``period`` keys an obligation within its (year, category): the month
      for monthly withholding, 1/2 for the VAT halves, 0 for annual filings.

Failure modes:
    - Construction with invalid enum values raises ``ValueError`` from
      the ``Enum`` constructor.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID, uuid4

from academy_kernel.logging_config import get_logger

logger = get_logger("modules.filing.models")

ANNUAL_PERIOD = 0


class FilingCategory(Enum):
    """Kinds of recurring statutory filing."""
    WITHHOLDING = "withholding"
    VALUE_ADDED_TAX = "value_added_tax"
    INCOME_TAX = "income_tax"
    LOCAL_INCOME_TAX = "local_income_tax"
    BUSINESS_STATUS_REPORT = "business_status_report"


class FilingStatus(Enum):
    """Obligation lifecycle states."""
    PENDING = "pending"
    FILED = "filed"
    PAID = "paid"


@dataclass(frozen=True)
class FilingObligation:
    """One statutory deadline for one year."""
    year: int
    category: FilingCategory
    period: int
    due_date: date
    month: int | None = None
    status: FilingStatus = FilingStatus.PENDING
    paid_amount: int | None = None
    description: str = ""
    id: UUID = field(default_factory=uuid4, compare=False)

    def __post_init__(self):
        if self.paid_amount is not None and self.paid_amount < 0:
            raise ValueError(f"paid_amount cannot be negative: {self.paid_amount}")

    @property
    def key(self) -> tuple[int, FilingCategory, int]:
        """Natural identity: at most one obligation per key."""
        return (self.year, self.category, self.period)

    @property
    def is_settled(self) -> bool:
        return self.status == FilingStatus.PAID

    def days_until_due(self, today: date) -> int:
        return (self.due_date - today).days
