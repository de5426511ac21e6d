"""Build workflows out of other workflows and steps.

Combinators only return new Workflow and Step values; nothing here
runs a step.
"""
from __future__ import annotations

from glassine.modules.engine.types import Step, Workflow


def with_retry(
    step: Step,
    *,
    max_attempts: int,
    retry_delay_seconds: float = 0.0,
) -> Step:
    """Return a copy of step with the given retry policy."""
    return Step(
        name=step.name,
        function=step.function,
        always_run=step.always_run,
        max_attempts=max_attempts,
        retry_delay_seconds=retry_delay_seconds,
    )


def sequence(
    workflow_a: Workflow,
    workflow_b: Workflow,
    *,
    name: str | None = None,
    description: str | None = None,
) -> Workflow:
    """Compose two workflows into a sequential workflow.

    Returns a new Workflow with steps from A followed
    by steps from B. Context propagates across the
    boundary via the engine's promote_outputs_to_inputs.
    """
    effective_name = name or (
        f"{workflow_a.name}_then_{workflow_b.name}"
    )
    effective_desc = description or (
        f"Sequence: {workflow_a.name} -> {workflow_b.name}"
    )
    return Workflow(
        name=effective_name,
        description=effective_desc,
        steps=[*workflow_a.steps, *workflow_b.steps],
    )
