"""
Academy Engines - pure calculation core.

Engines never touch the database or read the clock; every input is passed
explicitly and every output is a value object.
"""

from academy_engines.time_ledger import (
    effective_shifts,
    format_minutes,
    summarize_month,
    worked_minutes,
)

__all__ = [
    "effective_shifts",
    "format_minutes",
    "summarize_month",
    "worked_minutes",
]
