"""
Statutory Filing Calendar (``academy_modules.filing.calendar``).

Responsibility
--------------
Generate the academy's recurring tax-filing obligations for one calendar
year from a declarative rule table.  Pure: persistence and the
generate-once guarantee belong to ``FilingScheduleService``.

Rule table
----------
=========================  =======  =================================
Category                   Period   Due date
=========================  =======  =================================
``withholding``            1..12    10th of the following month
``value_added_tax``        1        ``year-01-25``
``value_added_tax``        2        ``year-07-25``
``income_tax``             0        ``year-05-31``
``local_income_tax``       0        ``year-05-31``
``business_status_report`` 0        ``year-02-10``
=========================  =======  =================================

The December withholding obligation falls due in January of ``year + 1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from academy_kernel.logging_config import get_logger
from academy_modules.filing.models import (
    ANNUAL_PERIOD,
    FilingCategory,
    FilingObligation,
)

logger = get_logger("modules.filing.calendar")

WITHHOLDING_DUE_DAY = 10


@dataclass(frozen=True)
class AnnualFilingRule:
    """A filing due once (per period) on a fixed day of the filing year."""
    category: FilingCategory
    period: int
    due_month: int
    due_day: int
    description: str


ANNUAL_FILING_RULES: tuple[AnnualFilingRule, ...] = (
    AnnualFilingRule(
        FilingCategory.VALUE_ADDED_TAX, 1, 1, 25,
        "VAT return, second half of the prior year",
    ),
    AnnualFilingRule(
        FilingCategory.VALUE_ADDED_TAX, 2, 7, 25,
        "VAT return, first half of the year",
    ),
    AnnualFilingRule(
        FilingCategory.INCOME_TAX, ANNUAL_PERIOD, 5, 31,
        "Comprehensive income tax return",
    ),
    AnnualFilingRule(
        FilingCategory.LOCAL_INCOME_TAX, ANNUAL_PERIOD, 5, 31,
        "Local income tax return",
    ),
    AnnualFilingRule(
        FilingCategory.BUSINESS_STATUS_REPORT, ANNUAL_PERIOD, 2, 10,
        "Business status report for tax-exempt operators",
    ),
)


def withholding_due_date(year: int, month: int) -> date:
    """Due date of month ``month``'s withholding: the 10th of the next month."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    if month == 12:
        return date(year + 1, 1, WITHHOLDING_DUE_DAY)
    return date(year, month + 1, WITHHOLDING_DUE_DAY)


def build_filing_schedule(year: int) -> list[FilingObligation]:
    """
    Build the full set of ``pending`` obligations for ``year``.

    Returns 12 monthly withholding obligations followed by the annual and
    semiannual filings, in rule-table order.  Deterministic apart from the
    generated ids.
    """
    obligations = [
        FilingObligation(
            year=year,
            category=FilingCategory.WITHHOLDING,
            period=month,
            month=month,
            due_date=withholding_due_date(year, month),
            description=f"Withholding tax for {year}-{month:02d}",
        )
        for month in range(1, 13)
    ]
    obligations.extend(
        FilingObligation(
            year=year,
            category=rule.category,
            period=rule.period,
            due_date=date(year, rule.due_month, rule.due_day),
            description=rule.description,
        )
        for rule in ANNUAL_FILING_RULES
    )

    logger.debug(
        "filing_schedule_built",
        extra={"year": year, "obligation_count": len(obligations)},
    )
    return obligations
