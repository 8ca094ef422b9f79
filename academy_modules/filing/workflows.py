"""Filing Workflows.

State machine for statutory filing obligations.
"""

from academy_kernel.domain.workflow import Transition, Workflow
from academy_kernel.logging_config import get_logger

logger = get_logger("modules.filing.workflows")


# -----------------------------------------------------------------------------
# Filing Obligation Workflow
# -----------------------------------------------------------------------------

FILING_OBLIGATION_WORKFLOW = Workflow(
    name="filing_obligation",
    description="Statutory filing obligation lifecycle",
    initial_state="pending",
    states=(
        "pending",
        "filed",
        "paid",
    ),
    transitions=(
        Transition("pending", "filed", action="file"),
        Transition("filed", "paid", action="pay"),
    ),
    terminal_states=("paid",),
)

logger.info(
    "filing_workflow_defined",
    extra={
        "workflow": FILING_OBLIGATION_WORKFLOW.name,
        "states": list(FILING_OBLIGATION_WORKFLOW.states),
    },
)
