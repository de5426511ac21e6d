"""Parse a definition document held in the workflow context."""
from __future__ import annotations

from returns.io import IOFailure, IOResult, IOSuccess
from returns.result import Failure

from glassine.modules.definition import parse_definition
from glassine.modules.errors import PipelineError
from glassine.modules.steps._inputs import missing_input
from glassine.modules.types import WorkflowContext


def parse_definition_step(
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Parse ctx.inputs["definition_text"] into commands.

    Produces ctx.outputs["commands"] (list of Command).
    """
    text = ctx.inputs.get("definition_text")
    if not isinstance(text, str):
        return missing_input(ctx, "definition_text", "parse_definition_step")

    result = parse_definition(text)
    if isinstance(result, Failure):
        error = result.failure().at_step("parse_definition_step")
        source = ctx.inputs.get("definition_path")
        if source is not None:
            error = error.with_context(definition_path=str(source))
        return IOFailure(error)

    return IOSuccess(
        ctx.with_updates(outputs={"commands": result.unwrap()}),
    )
