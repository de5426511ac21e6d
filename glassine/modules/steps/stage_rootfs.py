"""Stage a resized copy of the base root filesystem for one build."""
from __future__ import annotations

from returns.io import IOFailure, IOResult, IOSuccess

from glassine.modules import io_ops
from glassine.modules.errors import PipelineError
from glassine.modules.images import ImageReference, parse_size
from glassine.modules.steps._inputs import get_config, missing_input
from glassine.modules.steps.plan_build import BuildPlan
from glassine.modules.types import WorkflowContext


def stage_rootfs(
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Copy the cached rootfs into the build directory and resize it.

    The build directory is <builds_dir>/<build_id>. The copy is
    truncated to config.rootfs_size, growing or shrinking it.
    Produces ctx.outputs["rootfs_path"] and ctx.outputs["build_id"].
    """
    image = ctx.inputs.get("image")
    if not isinstance(image, ImageReference):
        return missing_input(ctx, "image", "stage_rootfs")
    plan = ctx.inputs.get("build_plan")
    if not isinstance(plan, BuildPlan):
        return missing_input(ctx, "build_plan", "stage_rootfs")

    config = get_config(ctx)
    try:
        size = parse_size(config.rootfs_size)
    except ValueError as exc:
        return IOFailure(
            PipelineError(
                step_name="stage_rootfs",
                error_type="InvalidSizeError",
                message=str(exc),
                context={"rootfs_size": config.rootfs_size},
            ),
        )

    build_dir = config.builds_dir / plan.build_id
    source = image.artifact_path(config.rootfs_artifact)
    target = build_dir / config.rootfs_artifact

    result = (
        io_ops.make_directory(build_dir)
        .bind(lambda _: io_ops.copy_file(source, target))
        .bind(lambda _: io_ops.truncate_file(target, size))
    )
    if isinstance(result, IOFailure):
        return result

    return IOSuccess(
        ctx.with_updates(
            outputs={
                "rootfs_path": str(target),
                "build_id": plan.build_id,
            },
        ),
    )
