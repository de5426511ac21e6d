"""Fetch the base image named by a build plan's origin."""
from __future__ import annotations

from returns.io import IOFailure, IOResult, IOSuccess

from glassine.modules import io_ops
from glassine.modules.errors import PipelineError
from glassine.modules.images import ImageReference, resolve_image
from glassine.modules.steps._inputs import get_config, missing_input
from glassine.modules.steps.plan_build import BuildPlan
from glassine.modules.types import WorkflowContext


def _download_artifact(
    image: ImageReference,
    artifact: str,
) -> IOResult[None, PipelineError]:
    url = image.artifact_url(artifact)
    io_ops.write_stderr(f"Downloading {url}\n")
    return io_ops.download_file(url, image.artifact_path(artifact))


def fetch_image(
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Ensure the origin image's artifacts are cached locally.

    Only artifacts missing from the cache directory are downloaded.
    Produces ctx.outputs["image"] (ImageReference) and
    ctx.outputs["downloaded"] (artifact names fetched this run).
    """
    plan = ctx.inputs.get("build_plan")
    if not isinstance(plan, BuildPlan):
        return missing_input(ctx, "build_plan", "fetch_image")

    config = get_config(ctx)
    try:
        image = resolve_image(plan.origin, config.images_dir)
    except ValueError as exc:
        return IOFailure(
            PipelineError(
                step_name="fetch_image",
                error_type="InvalidOriginError",
                message=str(exc),
                context={"origin": plan.origin},
            ),
        )

    missing = [
        artifact
        for artifact in config.artifacts
        if not io_ops.path_exists(image.artifact_path(artifact))
    ]
    if missing:
        io_ops.write_stderr(
            f"No local version of this object was found: {image.name}\n",
        )
        mkdir_result = io_ops.make_directory(image.directory)
        if isinstance(mkdir_result, IOFailure):
            return mkdir_result

    for artifact in missing:
        result = _download_artifact(image, artifact)
        if isinstance(result, IOFailure):
            return result

    return IOSuccess(
        ctx.with_updates(
            outputs={"image": image, "downloaded": missing},
        ),
    )
