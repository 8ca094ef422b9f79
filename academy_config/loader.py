"""
Policy Loader (``academy_config.loader``).

Responsibility
--------------
Loads payroll policy YAML files and parses them into frozen
``PayrollPolicy`` tables.  Consumed by ``academy_config.get_active_policy``
and by tests that exercise alternative rate tables.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on the payroll
policy dataclass only; no kernel services, no database.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required keys (``version``, ``effective_year``) never default.
* ``compute_policy_checksum`` produces a deterministic SHA-256 hash for
  policy identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``payroll_policy`` section or required key  -> ``KeyError``.
* Out-of-range rate or negative amount  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from academy_kernel.logging_config import get_logger
from academy_modules.payroll.config import PayrollPolicy

logger = get_logger("config.loader")

POLICY_SECTION = "payroll_policy"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_payroll_policy(data: dict[str, Any]) -> PayrollPolicy:
    """Parse a ``PayrollPolicy`` from the ``payroll_policy`` section of a dict."""
    if POLICY_SECTION not in data:
        raise KeyError(f"Policy file has no '{POLICY_SECTION}' section")
    section = data[POLICY_SECTION]
    if not isinstance(section, dict):
        raise ValueError(f"'{POLICY_SECTION}' must be a mapping, got {type(section).__name__}")
    return PayrollPolicy.from_dict(section)


def load_payroll_policy(path: Path | str) -> PayrollPolicy:
    """Load and validate a payroll policy table from a YAML file."""
    path = Path(path)
    policy = parse_payroll_policy(load_yaml_file(path))
    logger.info(
        "payroll_policy_loaded",
        extra={
            "path": str(path),
            "version": policy.version,
            "effective_year": policy.effective_year,
            "checksum": compute_policy_checksum(policy),
        },
    )
    return policy


def compute_policy_checksum(policy: PayrollPolicy) -> str:
    """
    SHA-256 of the policy's canonical JSON serialization.

    Identical tables always produce identical checksums.
    """
    canonical = json.dumps(policy.to_dict(), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
