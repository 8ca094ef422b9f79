"""Tests for kernel domain value objects: Workflow and Clock."""

from datetime import date, datetime, timezone

import pytest

from academy_kernel.domain.clock import DeterministicClock, SystemClock
from academy_kernel.domain.workflow import Transition, Workflow


class TestWorkflow:

    def test_unknown_initial_state_rejected(self):
        with pytest.raises(ValueError):
            Workflow(
                name="broken",
                description="",
                initial_state="draft",
                states=("pending",),
                transitions=(),
            )

    def test_transition_to_unknown_state_rejected(self):
        with pytest.raises(ValueError):
            Workflow(
                name="broken",
                description="",
                initial_state="pending",
                states=("pending",),
                transitions=(Transition("pending", "done", action="finish"),),
            )

    def test_find_transition(self):
        wf = Workflow(
            name="simple",
            description="",
            initial_state="a",
            states=("a", "b"),
            transitions=(Transition("a", "b", action="go"),),
        )
        assert wf.find_transition("a", "b").action == "go"
        assert wf.find_transition("b", "a") is None


class TestClock:

    def test_deterministic_default(self):
        clock = DeterministicClock()
        assert clock.now() == datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
        assert clock.today() == date(2026, 1, 1)

    def test_advance_days(self):
        clock = DeterministicClock()
        clock.advance_days(31)
        assert clock.today() == date(2026, 2, 1)

    def test_set_time_resets_advance(self):
        clock = DeterministicClock()
        clock.advance(3600)
        clock.set_time(datetime(2026, 5, 30, 0, 0, tzinfo=timezone.utc))
        assert clock.today() == date(2026, 5, 30)

    def test_system_clock_is_aware(self):
        assert SystemClock().now().tzinfo is not None
