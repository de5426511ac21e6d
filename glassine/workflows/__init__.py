"""Workflow registry and discovery (Tier 1 API)."""
from __future__ import annotations

from glassine.modules.engine.combinators import sequence, with_retry
from glassine.modules.engine.types import Step, Workflow
from glassine.modules.types import GlassineConfig


class WorkflowName:
    """Registry of valid workflow names."""

    CHECK = "check"
    BUILD = "build"


# --- Registered workflows ---

_CHECK = Workflow(
    name=WorkflowName.CHECK,
    description="Read, parse and plan a definition without touching images",
    steps=[
        Step(
            name="read_definition",
            function="read_definition",
        ),
        Step(
            name="parse_definition",
            function="parse_definition_step",
        ),
        Step(
            name="plan_build",
            function="plan_build_step",
        ),
    ],
)

_STAGE = Workflow(
    name="stage",
    description="Fetch the origin image and stage its rootfs",
    steps=[
        Step(
            name="fetch_image",
            function="fetch_image",
        ),
        Step(
            name="stage_rootfs",
            function="stage_rootfs",
        ),
        Step(
            name="log_build_event",
            function="log_build_event_safe",
            always_run=True,
        ),
    ],
)


def build_workflow(config: GlassineConfig | None = None) -> Workflow:
    """Return the build workflow with config's download retry policy."""
    effective = config or GlassineConfig()
    stage_steps = [
        with_retry(
            step,
            max_attempts=effective.download_attempts,
            retry_delay_seconds=effective.retry_delay_seconds,
        )
        if step.function == "fetch_image"
        else step
        for step in _STAGE.steps
    ]
    return sequence(
        _CHECK,
        Workflow(
            name=_STAGE.name,
            description=_STAGE.description,
            steps=stage_steps,
        ),
        name=WorkflowName.BUILD,
        description=(
            "Check a definition, fetch its origin image"
            " and stage a resized rootfs"
        ),
    )


_REGISTRY: dict[str, Workflow] = {
    _CHECK.name: _CHECK,
    WorkflowName.BUILD: build_workflow(),
}


def load_workflow(name: str) -> Workflow | None:
    """Pure lookup -- find workflow by name."""
    return _REGISTRY.get(name)


def list_workflows() -> list[Workflow]:
    """Return registered workflows."""
    return list(_REGISTRY.values())
