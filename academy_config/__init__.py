"""
academy_config -- versioned payroll policy tables.

Responsibility:
    Provides the policy table the Payroll Formula Selector binds at
    construction.  ``get_active_policy()`` returns the bundled table;
    ``load_payroll_policy(path)`` loads any other table from YAML.

Architecture position:
    Configuration -- sits above ``academy_kernel`` and beside
    ``academy_modules``.  The kernel MUST NEVER import from here.

Failure modes:
    - ``FileNotFoundError`` -- policy file missing.
    - ``KeyError`` / ``ValueError`` -- missing keys or out-of-range values.
"""

from __future__ import annotations

from pathlib import Path

from academy_config.loader import compute_policy_checksum, load_payroll_policy
from academy_modules.payroll.config import PayrollPolicy

DEFAULT_POLICY_PATH = Path(__file__).parent / "policies" / "payroll_policy.yaml"


def get_active_policy(path: Path | None = None) -> PayrollPolicy:
    """The bundled payroll policy table, or the one at ``path``."""
    return load_payroll_policy(path or DEFAULT_POLICY_PATH)


__all__ = [
    "DEFAULT_POLICY_PATH",
    "compute_policy_checksum",
    "get_active_policy",
    "load_payroll_policy",
]
