"""
Payroll Policy Table.

Holds every statutory constant the deduction formulas read: the four
employee-side insurance sub-rates, the salaried withholding brackets, the
part-time exemption threshold, the flat withholding rate and the local
surtax ratio.  Rates change annually; a change is a new table version,
never a new code path.

    policy = PayrollPolicy.default()
    policy = PayrollPolicy.from_dict(load_yaml_file(path)["payroll_policy"])
"""

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Self

from academy_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.config")

_RATE_FIELDS = (
    "pension_rate",
    "health_rate",
    "long_term_care_ratio",
    "employment_insurance_rate",
    "low_bracket_rate",
    "high_bracket_rate",
    "flat_withholding_rate",
    "local_tax_ratio",
)

_AMOUNT_FIELDS = (
    "earned_income_deduction",
    "bracket_threshold",
    "high_bracket_offset",
    "parttime_exemption_threshold",
)


@dataclass(frozen=True)
class PayrollPolicy:
    """
    Versioned table of payroll policy constants.

    Field defaults are the built-in table.  Override at instantiation or
    load a YAML table through ``academy_config.load_payroll_policy``.
    """

    version: str = "2026.1"
    effective_year: int = 2026

    # Employee-side insurance: pension + health + long-term care (a ratio of
    # health) + employment insurance, applied as one combined rate.
    pension_rate: Decimal = Decimal("0.045")
    health_rate: Decimal = Decimal("0.03545")
    long_term_care_ratio: Decimal = Decimal("0.1295")
    employment_insurance_rate: Decimal = Decimal("0.009")

    # Salaried withholding brackets
    earned_income_deduction: int = 150_000
    bracket_threshold: int = 1_400_000
    low_bracket_rate: Decimal = Decimal("0.06")
    high_bracket_rate: Decimal = Decimal("0.15")
    high_bracket_offset: int = 126_000

    # Part-time exemption and flat withholding
    parttime_exemption_threshold: int = 1_690_000
    flat_withholding_rate: Decimal = Decimal("0.033")

    # Local surtax on withholding
    local_tax_ratio: Decimal = Decimal("0.10")

    def __post_init__(self):
        if not self.version:
            raise ValueError("version must be non-empty")
        for name in _RATE_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                raise ValueError(f"{name} must be Decimal, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"{name} cannot be negative")
            if value > 1:
                raise ValueError(f"{name} cannot exceed 1 (100%)")
        for name in _AMOUNT_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

        logger.debug(
            "payroll_policy_initialized",
            extra={
                "version": self.version,
                "effective_year": self.effective_year,
                "insurance_rate": str(self.insurance_rate),
            },
        )

    @property
    def insurance_rate(self) -> Decimal:
        """Combined employee-side insurance rate."""
        return (
            self.pension_rate
            + self.health_rate
            + self.health_rate * self.long_term_care_ratio
            + self.employment_insurance_rate
        )

    @classmethod
    def default(cls) -> Self:
        """Built-in policy table."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a policy from a dictionary (e.g. a parsed YAML table).

        Rates are parsed through ``str`` so that YAML floats keep their
        written decimal value.
        """
        logger.info(
            "payroll_policy_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        kwargs: dict[str, Any] = {
            "version": str(data["version"]),
            "effective_year": int(data["effective_year"]),
        }
        for name in _RATE_FIELDS:
            if name in data:
                kwargs[name] = Decimal(str(data[name]))
        for name in _AMOUNT_FIELDS:
            if name in data:
                kwargs[name] = int(data[name])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view with rates rendered as strings."""
        return {
            key: str(value) if isinstance(value, Decimal) else value
            for key, value in asdict(self).items()
        }
