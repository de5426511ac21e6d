"""Data types that glassine workflows are declared with."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from returns.io import IOResult

    from glassine.modules.errors import PipelineError
    from glassine.modules.types import WorkflowContext

StepFunction = Callable[
    ["WorkflowContext"],
    "IOResult[WorkflowContext, PipelineError]",
]


@dataclass(frozen=True)
class Step:
    """A single step in a workflow pipeline.

    always_run steps execute even after an earlier step failed; they
    receive the failure as ctx.inputs["pipeline_failure"].
    """

    name: str
    function: str
    always_run: bool = False
    max_attempts: int = 1
    retry_delay_seconds: float = 0.0


@dataclass(frozen=True)
class Workflow:
    """Named, ordered list of steps, such as check or build."""

    name: str
    description: str
    steps: list[Step] = field(default_factory=list)
