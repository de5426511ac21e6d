"""Run glassine workflows step by step.

Steps are looked up by function name in _STEP_REGISTRY, so workflow
definitions stay plain data. Every step result is an IOResult; the
first failure becomes the workflow result.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from returns.io import IOFailure, IOResult, IOSuccess
from returns.unsafe import unsafe_perform_io

from glassine.modules.errors import PipelineError
from glassine.modules.io_ops import sleep_seconds
from glassine.modules.steps import (
    fetch_image,
    log_build_event_safe,
    parse_definition_step,
    plan_build_step,
    read_definition,
    stage_rootfs,
)

if TYPE_CHECKING:
    from glassine.modules.engine.types import (
        Step,
        StepFunction,
        Workflow,
    )
    from glassine.modules.types import WorkflowContext

_STEP_REGISTRY: dict[str, StepFunction] = {
    "fetch_image": fetch_image,
    "log_build_event_safe": log_build_event_safe,
    "parse_definition_step": parse_definition_step,
    "plan_build_step": plan_build_step,
    "read_definition": read_definition,
    "stage_rootfs": stage_rootfs,
}


def _resolve_step_function(
    function_name: str,
) -> IOResult[StepFunction, PipelineError]:
    """Look up a step callable. Unknown names list the registered ones."""
    step_fn = _STEP_REGISTRY.get(function_name)
    if step_fn is not None:
        return IOSuccess(step_fn)
    available = sorted(_STEP_REGISTRY.keys())
    return IOFailure(
        PipelineError(
            step_name="engine",
            error_type="UnknownStepFunction",
            message=(
                f"Unknown step function '{function_name}'."
                f" Available: {available}"
            ),
            context={
                "function_name": function_name,
                "available": available,
            },
        ),
    )


def run_step(
    step: Step,
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Run step once. An unknown function fails under step.name."""
    return (
        _resolve_step_function(step.function)
        .lash(lambda error: IOFailure(error.at_step(step.name)))
        .bind(lambda step_fn: step_fn(ctx))
    )


def _run_with_retries(
    step: Step,
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Run step up to step.max_attempts times.

    Before each retry the previous failure is added to the feedback
    the step sees and io_ops.sleep_seconds waits retry_delay_seconds.
    """
    attempts = max(step.max_attempts, 1)
    attempt_ctx = ctx
    result = run_step(step, attempt_ctx)
    for attempt in range(1, attempts):
        if isinstance(result, IOSuccess):
            break
        error = unsafe_perform_io(result.failure())
        attempt_ctx = attempt_ctx.add_feedback(
            f"Retry {attempt}/{attempts} for step '{step.name}':"
            f" {error.message}",
        )
        if step.retry_delay_seconds > 0:
            sleep_seconds(step.retry_delay_seconds)
        result = run_step(step, attempt_ctx)
    return result


def _promote(
    step: Step,
    index: int,
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    try:
        return IOSuccess(ctx.promote_outputs_to_inputs())
    except ValueError as exc:
        return IOFailure(
            PipelineError(
                step_name=step.name,
                error_type="ContextCollisionError",
                message=str(exc),
                context={"step_index": index},
            ),
        )


def run_workflow(
    workflow: Workflow,
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Run workflow steps in order.

    The first failure stops every later step except always_run ones,
    which see it as ctx.inputs["pipeline_failure"]. Their own failures
    are attached to the first one as context["always_run_failures"].
    Outputs of each step become inputs of the next.
    """
    current = ctx
    failure: PipelineError | None = None
    late_failures: list[dict[str, object]] = []
    last_index = len(workflow.steps) - 1

    for index, step in enumerate(workflow.steps):
        if failure is None:
            step_ctx = current
        elif step.always_run:
            step_ctx = current.with_updates(
                inputs={
                    **current.inputs,
                    "pipeline_failure": failure.to_dict(),
                },
            )
        else:
            continue

        result = _run_with_retries(step, step_ctx)
        if index < last_index:
            result = result.bind(
                lambda done, s=step, i=index: _promote(s, i, done),
            )

        if isinstance(result, IOSuccess):
            current = unsafe_perform_io(result.unwrap())
        elif failure is None:
            failure = unsafe_perform_io(result.failure())
        else:
            late_failures.append(
                unsafe_perform_io(result.failure()).to_dict(),
            )

    if failure is None:
        return IOSuccess(current)
    if late_failures:
        failure = failure.with_context(always_run_failures=late_failures)
    return IOFailure(failure)
