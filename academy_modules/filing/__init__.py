"""
Filing Module (``academy_modules.filing``).

Responsibility
--------------
The academy's statutory filing calendar: monthly withholding, the two VAT
periods, annual income and local income tax, and the business status
report.  Generates each year's obligations once and tracks their
``pending -> filed -> paid`` progress.

Architecture position
---------------------
**Modules layer** -- models, the pure calendar generator and the workflow
are exported here; ``FilingScheduleService`` lives in ``service.py``.
"""

from academy_modules.filing.calendar import ANNUAL_FILING_RULES, build_filing_schedule
from academy_modules.filing.models import FilingCategory, FilingObligation, FilingStatus
from academy_modules.filing.workflows import FILING_OBLIGATION_WORKFLOW

__all__ = [
    "ANNUAL_FILING_RULES",
    "FILING_OBLIGATION_WORKFLOW",
    "FilingCategory",
    "FilingObligation",
    "FilingStatus",
    "build_filing_schedule",
]
