"""Build plan derived from parsed definition commands.

The plan is what downstream collaborators consume: the origin to
fetch, the guest actions in document order, and the boot command.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from returns.io import IOFailure, IOResult, IOSuccess
from returns.result import Failure, Result, Success

from glassine.modules.definition import Command, CommandType
from glassine.modules.definition.command import fold_hash
from glassine.modules.errors import PipelineError
from glassine.modules.steps._inputs import missing_input
from glassine.modules.types import WorkflowContext

DEFAULT_WORKDIR = "/"


@dataclass(frozen=True)
class BuildAction:
    """A RUN, COPY or WORKDIR command with the workdir it runs in."""

    kind: CommandType
    value: str
    fingerprint: int
    workdir: str


@dataclass(frozen=True)
class BuildPlan:
    """Ordered actions for assembling one guest image."""

    origin: str
    actions: tuple[BuildAction, ...] = field(default_factory=tuple)
    entrypoint: str | None = None
    fingerprint: int = 0

    @property
    def build_id(self) -> str:
        """Fingerprint as eight hex digits, stable across runs."""
        return f"{self.fingerprint & 0xFFFFFFFF:08x}"

    def summary(self) -> dict[str, object]:
        return {
            "build_id": self.build_id,
            "origin": self.origin,
            "actions": len(self.actions),
            "entrypoint": self.entrypoint,
        }


def create_build_plan(
    commands: list[Command],
) -> Result[BuildPlan, PipelineError]:
    """Turn a validated command list into a BuildPlan (pure function).

    Expects the document-level invariants of the parser to hold:
    the first command is the only ORIGIN.
    """
    if not commands:
        return Failure(
            PipelineError(
                step_name="create_build_plan",
                error_type="EmptyDefinitionError",
                message="Definition declares no commands",
                context={},
            ),
        )

    origin = commands[0].value
    workdir = DEFAULT_WORKDIR
    entrypoint: str | None = None
    actions: list[BuildAction] = []
    for command in commands[1:]:
        if command.kind is CommandType.ENTRYPOINT:
            entrypoint = command.value
            continue
        if command.kind is CommandType.WORKDIR:
            workdir = command.value
        actions.append(
            BuildAction(
                kind=command.kind,
                value=command.value,
                fingerprint=command.fingerprint,
                workdir=workdir,
            ),
        )

    return Success(
        BuildPlan(
            origin=origin,
            actions=tuple(actions),
            entrypoint=entrypoint,
            fingerprint=fold_hash(
                len(commands), (c.fingerprint for c in commands),
            ),
        ),
    )


def plan_build_step(
    ctx: WorkflowContext,
) -> IOResult[WorkflowContext, PipelineError]:
    """Build the plan for ctx.inputs["commands"].

    Produces ctx.outputs["build_plan"].
    """
    commands = ctx.inputs.get("commands")
    if not isinstance(commands, list):
        return missing_input(ctx, "commands", "plan_build_step")

    result = create_build_plan(commands)
    if isinstance(result, Failure):
        return IOFailure(result.failure().at_step("plan_build_step"))

    return IOSuccess(
        ctx.with_updates(outputs={"build_plan": result.unwrap()}),
    )
