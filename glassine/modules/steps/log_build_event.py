"""Build event logging step functions.

Provides log_build_event() for core logging and
log_build_event_safe() for fail-open wrapper behavior.
"""
from __future__ import annotations

from datetime import UTC, datetime

from returns.io import IOFailure, IOResult, IOSuccess
from returns.unsafe import unsafe_perform_io

from glassine.modules import io_ops
from glassine.modules.errors import PipelineError
from glassine.modules.steps._inputs import get_config
from glassine.modules.steps.plan_build import BuildPlan
from glassine.modules.types import BuildEvent, WorkflowContext

_PAYLOAD_PATH_KEYS = ("definition_path", "rootfs_path")


def _build_payload(ctx: WorkflowContext) -> dict[str, object]:
    payload: dict[str, object] = {
        key: str(ctx.inputs[key])
        for key in _PAYLOAD_PATH_KEYS
        if key in ctx.inputs
    }
    downloaded = ctx.inputs.get("downloaded")
    if isinstance(downloaded, list):
        payload["downloaded"] = [str(a) for a in downloaded]
    plan = ctx.inputs.get("build_plan")
    if isinstance(plan, BuildPlan):
        payload["plan"] = plan.summary()
    failure = ctx.inputs.get("pipeline_failure")
    if isinstance(failure, dict):
        payload["failure"] = failure
    if ctx.feedback:
        payload["feedback"] = list(ctx.feedback)
    return payload


def log_build_event(
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Append a build event to the build-specific JSONL file.

    event_type comes from ctx.inputs["event_type"] when given,
    otherwise build_failed/build_succeeded depending on whether
    the pipeline reported a failure. The build id is the plan's
    build_id, or unknown-<timestamp> before a plan exists.
    """
    now = datetime.now(tz=UTC)

    plan = ctx.inputs.get("build_plan")
    if isinstance(plan, BuildPlan):
        build_id = plan.build_id
    else:
        build_id = f"unknown-{now.strftime('%Y%m%d%H%M%S')}"

    event_type = ctx.inputs.get("event_type")
    if not isinstance(event_type, str) or not event_type:
        event_type = (
            "build_failed"
            if "pipeline_failure" in ctx.inputs
            else "build_succeeded"
        )

    event = BuildEvent(
        timestamp=now.isoformat(),
        event_type=event_type,
        build_id=build_id,
        payload=_build_payload(ctx),
    )

    write_result = io_ops.write_build_log(
        get_config(ctx).logs_dir, build_id, event.to_jsonl(),
    )

    def _on_write_success(
        _: None,
    ) -> IOResult[WorkflowContext, PipelineError]:
        return IOSuccess(
            ctx.with_updates(
                outputs={"build_event_logged": True},
            ),
        )

    return (
        write_result
        .lash(lambda error: IOFailure(error.at_step("log_build_event")))
        .bind(_on_write_success)
    )


def log_build_event_safe(
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Fail-open wrapper for build event logging.

    Calls log_build_event(). On failure, reports to stderr
    and returns IOSuccess with failure info in outputs.
    NEVER returns IOFailure: a log write must not fail a build.
    """
    result = log_build_event(ctx)
    if isinstance(result, IOSuccess):
        return result

    error = unsafe_perform_io(result.failure())
    error_msg = str(error)

    io_ops.write_stderr(
        f"log_build_event_safe: {error_msg}\n",
    )

    return IOSuccess(
        ctx.with_updates(
            outputs={
                "build_event_logged": False,
                "build_event_error": error_msg,
            },
        ),
    )
