"""
Canonical workflow types (``academy_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for record lifecycles.  A module declares its
``Workflow`` once; services ask it whether a requested status change
is an allowed step before mutating anything.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/`` or outer layers.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow."""
    from_state: str
    to_state: str
    action: str


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a record lifecycle.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    Guarantees: ``initial_state`` is a member of ``states``.
    ``terminal_states`` are states with no outgoing transitions.
    """
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self):
        if self.initial_state not in self.states:
            raise ValueError(
                f"initial_state '{self.initial_state}' is not one of {self.states}"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"Transition {t.from_state}->{t.to_state} references an unknown state"
                )

    def find_transition(self, from_state: str, to_state: str) -> Transition | None:
        """Return the transition between two states, or None if not allowed."""
        for t in self.transitions:
            if t.from_state == from_state and t.to_state == to_state:
                return t
        return None

    def can_transition(self, from_state: str, to_state: str) -> bool:
        return self.find_transition(from_state, to_state) is not None
