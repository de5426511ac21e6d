"""Read a definition document from disk."""
from __future__ import annotations

from pathlib import Path

from returns.io import IOFailure, IOResult, IOSuccess

from glassine.modules import io_ops
from glassine.modules.errors import PipelineError
from glassine.modules.steps._inputs import missing_input
from glassine.modules.types import WorkflowContext


def read_definition(
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Read the file named by ctx.inputs["definition_path"].

    Produces ctx.outputs["definition_text"].
    """
    raw_path = ctx.inputs.get("definition_path")
    if not isinstance(raw_path, (str, Path)) or not str(raw_path).strip():
        return missing_input(ctx, "definition_path", "read_definition")

    return (
        io_ops.read_file(Path(raw_path))
        .lash(lambda error: IOFailure(error.at_step("read_definition")))
        .bind(
            lambda text: IOSuccess(
                ctx.with_updates(outputs={"definition_text": text}),
            ),
        )
    )
