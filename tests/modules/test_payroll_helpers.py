"""
Tests for Payroll pure helper functions.

Covers:
- compute_allowance: per-head, per-hour, none, half rounding toward +infinity, missing rates
- Employee insurance as a single floor over the combined rate
- Salaried bracket withholding, including the bracket edge
- Flat and part-time withholding, local surtax
- summarize_pay_slips year aggregation, per staff and per month
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from academy_kernel.exceptions import InvalidAllowancePolicyError
from academy_modules.payroll.config import PayrollPolicy
from academy_modules.payroll.helpers import (
    calculate_employee_insurance,
    calculate_flat_withholding,
    calculate_local_tax,
    calculate_parttime_withholding,
    calculate_salaried_withholding,
    compute_allowance,
    floor_amount,
    round_half_toward_positive,
    summarize_pay_slips,
)
from academy_modules.payroll.models import (
    AllowanceType,
    EmploymentClassification,
    PaySlip,
)

POLICY = PayrollPolicy.default()


def _unvalidated(staff, **fields):
    """Stand-in for a record that skipped construction checks."""
    for name, value in fields.items():
        object.__setattr__(staff, name, value)
    return staff


# =============================================================================
# Allowance Calculator
# =============================================================================


class TestComputeAllowance:

    def test_no_allowance(self, staff_factory):
        result = compute_allowance(staff_factory(), 30)
        assert result.amount == 0
        assert result.detail == ""

    def test_per_head(self, per_head_staff):
        result = compute_allowance(per_head_staff, 12)
        assert result.amount == 180_000
        assert result.detail == "12 persons × 15000"

    def test_per_hour_rounds_half_up(self, per_hour_staff):
        result = compute_allowance(per_hour_staff, 3)
        # 3 * 12500.5 = 37501.5
        assert result.amount == 37_502
        assert result.detail == "3 hours × 12500.5"

    def test_fractional_quantity(self, per_hour_staff):
        result = compute_allowance(per_hour_staff, Decimal("2.5"))
        # 2.5 * 12500.5 = 31251.25
        assert result.amount == 31_251
        assert result.detail == "2.5 hours × 12500.5"

    def test_zero_quantity(self, per_head_staff):
        assert compute_allowance(per_head_staff, 0).amount == 0

    def test_negative_quantity_scales_proportionally(self, per_head_staff):
        result = compute_allowance(per_head_staff, -2)
        assert result.amount == -30_000
        assert result.detail == "-2 persons × 15000"

    def test_negative_half_rounds_toward_positive(self, staff_factory):
        staff = staff_factory(
            allowance_type=AllowanceType.PER_HEAD,
            per_head_rate=Decimal("5"),
        )
        assert compute_allowance(staff, Decimal("-0.5")).amount == -2
        assert compute_allowance(staff, Decimal("0.5")).amount == 3

    def test_negative_per_hour_half(self, per_hour_staff):
        # -3 * 12500.5 = -37501.5
        assert compute_allowance(per_hour_staff, -3).amount == -37_501

    def test_only_matching_rate_is_read(self, staff_factory):
        staff = staff_factory(
            allowance_type=AllowanceType.PER_HEAD,
            per_head_rate=Decimal("10000"),
            per_hour_rate=Decimal("99999"),
        )
        assert compute_allowance(staff, 2).amount == 20_000

    def test_per_head_without_rate_rejected(self, per_head_staff):
        staff = _unvalidated(per_head_staff, per_head_rate=None)
        with pytest.raises(InvalidAllowancePolicyError) as exc_info:
            compute_allowance(staff, 5)
        assert exc_info.value.code == "INVALID_ALLOWANCE_POLICY"
        assert exc_info.value.staff_id == str(staff.id)

    def test_per_hour_with_zero_rate_rejected(self, per_hour_staff):
        staff = _unvalidated(per_hour_staff, per_hour_rate=Decimal("0"))
        with pytest.raises(InvalidAllowancePolicyError):
            compute_allowance(staff, 5)

    def test_rejection_is_logged(self, per_hour_staff, captured_logs):
        staff = _unvalidated(per_hour_staff, per_hour_rate=None)
        with pytest.raises(InvalidAllowancePolicyError):
            compute_allowance(staff, 1)
        records = [r for r in captured_logs() if r["message"] == "allowance_policy_missing_rate"]
        assert records
        assert records[0]["allowance_type"] == "per_hour"


class TestRoundHalfTowardPositive:

    @pytest.mark.parametrize("value, expected", [
        ("2.5", 3),
        ("2.4", 2),
        ("-2.5", -2),
        ("-2.6", -3),
        ("-0.5", 0),
        ("0", 0),
    ])
    def test_rounding(self, value, expected):
        assert round_half_toward_positive(Decimal(value)) == expected


# =============================================================================
# Deduction formulas
# =============================================================================


class TestFloorAmount:

    def test_truncates_positive(self):
        assert floor_amount(Decimal("82500.999")) == 82_500

    def test_integral_unchanged(self):
        assert floor_amount(Decimal("8250")) == 8_250


class TestInsurance:

    def test_combined_rate(self):
        assert POLICY.insurance_rate == Decimal("0.094040775")

    def test_single_floor_over_combined_rate(self):
        # 3,000,000 * 0.094040775 = 282,122.325
        assert calculate_employee_insurance(3_000_000, POLICY) == 282_122

    def test_zero_base(self):
        assert calculate_employee_insurance(0, POLICY) == 0


class TestSalariedWithholding:

    def test_low_bracket(self):
        # taxable = 1,000,000 - 94,040 - 150,000 = 755,960
        assert calculate_salaried_withholding(1_000_000, 94_040, POLICY) == 45_357

    def test_high_bracket(self):
        # taxable = 2,567,878 -> 385,181.7 - 126,000
        assert calculate_salaried_withholding(3_000_000, 282_122, POLICY) == 259_181

    def test_taxable_clamped_at_zero(self):
        assert calculate_salaried_withholding(100_000, 9_404, POLICY) == 0

    def test_bracket_edge_uses_high_formula(self):
        # With no offset the two formulas diverge sharply at the edge.
        policy = PayrollPolicy(high_bracket_offset=0)
        # taxable exactly 1,400,000
        assert calculate_salaried_withholding(1_550_000, 0, policy) == 210_000

    def test_just_below_edge_uses_low_formula(self):
        policy = PayrollPolicy(high_bracket_offset=0)
        # taxable 1,399,999 -> 83,999.94
        assert calculate_salaried_withholding(1_549_999, 0, policy) == 83_999

    def test_default_brackets_meet_at_edge(self):
        assert calculate_salaried_withholding(1_550_000, 0, POLICY) == 84_000


class TestFlatAndParttime:

    def test_flat_rate(self):
        assert calculate_flat_withholding(2_500_000, POLICY) == 82_500

    def test_flat_rate_floors(self):
        # 1,234,567 * 0.033 = 40,740.711
        assert calculate_flat_withholding(1_234_567, POLICY) == 40_740

    def test_parttime_above_threshold(self):
        assert calculate_parttime_withholding(1_800_000, POLICY) == 3_630

    def test_parttime_at_threshold_exempt(self):
        assert calculate_parttime_withholding(1_690_000, POLICY) == 0

    def test_parttime_below_threshold_exempt(self):
        assert calculate_parttime_withholding(900_000, POLICY) == 0

    def test_local_tax(self):
        assert calculate_local_tax(82_500, POLICY) == 8_250
        assert calculate_local_tax(13_187, POLICY) == 1_318


# =============================================================================
# Aggregation
# =============================================================================


def _slip(staff_id, year, month, gross, withholding, local_tax, insurance=0):
    return PaySlip(
        staff_id=staff_id,
        year=year,
        month=month,
        classification=EmploymentClassification.FREELANCE,
        base_pay=gross,
        extra_pay=0,
        allowance_amount=0,
        allowance_detail="",
        gross_pay=gross,
        insurance=insurance,
        withholding_tax=withholding,
        local_tax=local_tax,
        net_pay=gross - insurance - withholding - local_tax,
        policy_version=POLICY.version,
    )


class TestSummarizePaySlips:

    def test_year_totals_and_per_staff(self):
        a, b = uuid4(), uuid4()
        slips = [
            _slip(a, 2026, 1, 2_500_000, 82_500, 8_250),
            _slip(b, 2026, 1, 3_000_000, 259_181, 25_918, insurance=282_122),
            _slip(a, 2026, 2, 2_000_000, 66_000, 6_600),
            _slip(a, 2025, 12, 9_999_999, 1, 0),
        ]

        summary = summarize_pay_slips(slips, 2026)

        assert summary.slip_count == 3
        assert summary.total_gross == 7_500_000
        assert summary.total_withheld == 82_500 + 8_250 + 259_181 + 25_918 + 66_000 + 6_600
        assert summary.total_insurance == 282_122
        assert [t.staff_id for t in summary.by_staff] == [a, b]
        assert summary.by_staff[0].gross_pay == 4_500_000
        assert summary.by_staff[0].total_withheld == 163_350
        assert summary.by_staff[0].slip_count == 2

    def test_month_totals_ascend(self):
        a, b = uuid4(), uuid4()
        slips = [
            _slip(a, 2026, 3, 2_000_000, 66_000, 6_600),
            _slip(a, 2026, 1, 2_500_000, 82_500, 8_250),
            _slip(b, 2026, 1, 3_000_000, 259_181, 25_918, insurance=282_122),
            _slip(b, 2025, 3, 9_999_999, 1, 0),
        ]

        summary = summarize_pay_slips(slips, 2026)

        assert [m.month for m in summary.by_month] == [1, 3]
        january, march = summary.by_month
        assert january.gross_pay == 5_500_000
        assert january.total_withheld == 82_500 + 8_250 + 259_181 + 25_918
        assert january.slip_count == 2
        assert march.gross_pay == 2_000_000
        assert march.slip_count == 1
        assert sum(m.gross_pay for m in summary.by_month) == summary.total_gross

    def test_empty_year(self):
        summary = summarize_pay_slips([], 2026)
        assert summary.slip_count == 0
        assert summary.total_gross == 0
        assert summary.by_staff == ()
        assert summary.by_month == ()
