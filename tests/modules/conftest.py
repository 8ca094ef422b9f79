"""
Shared fixtures for module tests.

Staff-member builders for each employment classification, plus the
services wired to the shared test session.  Every fixture is opt-in.
"""

from datetime import date, time
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from academy_modules.filing.service import FilingScheduleService
from academy_modules.payroll.models import (
    AllowanceType,
    EmploymentClassification,
    ShiftCategory,
    StaffMember,
    WorkShift,
)
from academy_modules.payroll.service import PayrollService

TEST_STAFF_ID = UUID("00000000-0000-4000-a000-000000000001")


def make_staff(**overrides) -> StaffMember:
    """Build a StaffMember with sensible defaults (freelance, no allowance)."""
    defaults = dict(
        id=uuid4(),
        staff_number=f"T-{uuid4().hex[:8]}",
        name="Kim Instructor",
        classification=EmploymentClassification.FREELANCE,
        base_amount=2_500_000,
    )
    defaults.update(overrides)
    return StaffMember(**defaults)


def make_shift(staff_id: UUID, **overrides) -> WorkShift:
    """Build a 14:00-18:00 regular shift with a 30 minute break."""
    defaults = dict(
        id=uuid4(),
        staff_id=staff_id,
        work_date=date(2026, 3, 2),
        start_time=time(14, 0),
        end_time=time(18, 0),
        break_minutes=30,
        category=ShiftCategory.REGULAR,
    )
    defaults.update(overrides)
    return WorkShift(**defaults)


@pytest.fixture
def freelance_staff() -> StaffMember:
    return make_staff(id=TEST_STAFF_ID, staff_number="T-0001")


@pytest.fixture
def per_head_staff() -> StaffMember:
    return make_staff(
        allowance_type=AllowanceType.PER_HEAD,
        per_head_rate=Decimal("15000"),
    )


@pytest.fixture
def per_hour_staff() -> StaffMember:
    return make_staff(
        classification=EmploymentClassification.HOURLY_PARTTIME,
        base_amount=20_000,
        allowance_type=AllowanceType.PER_HOUR,
        per_hour_rate=Decimal("12500.5"),
    )


@pytest.fixture
def payroll_service(session) -> PayrollService:
    return PayrollService(session)


@pytest.fixture
def filing_service(session, deterministic_clock) -> FilingScheduleService:
    return FilingScheduleService(session, clock=deterministic_clock)


@pytest.fixture
def staff_factory():
    """Return the ``make_staff`` builder."""
    return make_staff


@pytest.fixture
def shift_factory():
    """Return the ``make_shift`` builder."""
    return make_shift
