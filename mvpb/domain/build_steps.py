"""Build step tracker: a monotonic state machine over the phase catalog.

Every function returns a new list of new BuildStep objects; callers'
lists are never mutated.
"""

import logging

from mvpb.domain.models.build_step import BuildStep, StepStatus

logger = logging.getLogger(__name__)

# Phase catalog in fixed order. Order is the monotonic ordering used by
# advance_to_step and must match the step inference rule order.
DEFAULT_BUILD_STEPS: tuple[BuildStep, ...] = (
    BuildStep(id="analyze", title="Analyzing requirements", description="Understanding your app idea"),
    BuildStep(id="plan", title="Planning architecture", description="Designing the structure"),
    BuildStep(id="scaffold", title="Scaffolding project", description="Creating project structure"),
    BuildStep(id="components", title="Building components", description="Creating UI components"),
    BuildStep(id="pages", title="Creating pages", description="Building page layouts"),
    BuildStep(id="api", title="Setting up API", description="Creating API routes"),
    BuildStep(id="database", title="Database schema", description="Defining data models"),
    BuildStep(id="styling", title="Applying styles", description="Adding CSS and animations"),
    BuildStep(id="testing", title="Final checks", description="Verifying everything works"),
)


def initialize_build_steps() -> list[BuildStep]:
    """Return a fresh copy of the catalog with every step pending."""
    return [step.model_copy(update={"status": StepStatus.PENDING}) for step in DEFAULT_BUILD_STEPS]


def set_step_active(steps: list[BuildStep], step_id: str) -> list[BuildStep]:
    """Mark exactly the named step active, leaving every other step as is."""
    return [
        step.model_copy(update={"status": StepStatus.ACTIVE}) if step.id == step_id else step.model_copy()
        for step in steps
    ]


def update_build_steps(
    steps: list[BuildStep],
    completed_step_id: str,
    next_step_id: str | None = None,
) -> list[BuildStep]:
    """Mark one step completed and, optionally, another step active."""
    updated: list[BuildStep] = []
    for step in steps:
        if step.id == completed_step_id:
            updated.append(step.model_copy(update={"status": StepStatus.COMPLETED}))
        elif next_step_id is not None and step.id == next_step_id:
            updated.append(step.model_copy(update={"status": StepStatus.ACTIVE}))
        else:
            updated.append(step.model_copy())
    return updated


def _current_index(steps: list[BuildStep]) -> int:
    """Index of the furthest active step, else the furthest completed, else -1."""
    for wanted in (StepStatus.ACTIVE, StepStatus.COMPLETED):
        indexes = [i for i, step in enumerate(steps) if step.status == wanted]
        if indexes:
            return max(indexes)
    return -1


def advance_to_step(steps: list[BuildStep], step_id: str) -> list[BuildStep]:
    """Apply an inferred phase to the step list without ever regressing.

    If step_id sits strictly after the current step, every earlier step is
    completed, step_id becomes active and later steps are untouched.
    Otherwise (same, earlier, or unknown id) the steps are returned unchanged.

    Args:
        steps: Current step list in catalog order.
        step_id: Phase id produced by step inference.

    Returns:
        New step list.
    """
    target = next((i for i, step in enumerate(steps) if step.id == step_id), None)
    if target is None:
        logger.debug(f"Ignoring unknown step id: {step_id}")
        return [step.model_copy() for step in steps]

    current = _current_index(steps)
    if target <= current:
        return [step.model_copy() for step in steps]

    logger.debug(f"Advancing build steps to '{step_id}' (index {current} -> {target})")
    updated: list[BuildStep] = []
    for i, step in enumerate(steps):
        if i < target:
            updated.append(step.model_copy(update={"status": StepStatus.COMPLETED}))
        elif i == target:
            updated.append(step.model_copy(update={"status": StepStatus.ACTIVE}))
        else:
            updated.append(step.model_copy())
    return updated


def active_step_id(steps: list[BuildStep]) -> str | None:
    """Return the id of the furthest active step, if any."""
    active = [step.id for step in steps if step.status == StepStatus.ACTIVE]
    return active[-1] if active else None


def calculate_progress(steps: list[BuildStep]) -> float:
    """Progress in [0, 100]: completed steps count 1, active steps count 0.5."""
    if not steps:
        return 0.0
    completed = sum(1 for step in steps if step.status == StepStatus.COMPLETED)
    active = sum(1 for step in steps if step.status == StepStatus.ACTIVE)
    return (completed + active * 0.5) / len(steps) * 100
