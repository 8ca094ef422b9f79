"""Pure domain value objects shared by every module."""

from academy_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from academy_kernel.domain.workflow import Transition, Workflow

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "Transition",
    "Workflow",
]
