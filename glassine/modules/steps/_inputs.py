"""Shared input accessors for build steps."""
from __future__ import annotations

from typing import TYPE_CHECKING

from returns.io import IOFailure

from glassine.modules.errors import PipelineError
from glassine.modules.types import GlassineConfig

if TYPE_CHECKING:
    from returns.io import IOResult

    from glassine.modules.types import WorkflowContext


def get_config(ctx: WorkflowContext) -> GlassineConfig:
    """Return ctx.inputs["config"], or the default configuration."""
    config = ctx.inputs.get("config")
    if isinstance(config, GlassineConfig):
        return config
    return GlassineConfig()


def missing_input(
    ctx: WorkflowContext,
    key: str,
    step_name: str,
) -> IOResult[WorkflowContext, PipelineError]:
    """Build the failure for an absent or mistyped required input."""
    return IOFailure(
        PipelineError(
            step_name=step_name,
            error_type="MissingInputError",
            message=(
                f"Required input '{key}'"
                " is missing or has the wrong type"
            ),
            context={"available_inputs": list(
                ctx.inputs.keys(),
            )},
        ),
    )
