"""Shared type definitions for the Glassine build pipeline."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_DIR = Path("/var/glassine")
DEFAULT_ROOTFS_SIZE = "2G"
KERNEL_ARTIFACT = "vmlinux"
ROOTFS_ARTIFACT = "rootfs.ext4"


@dataclass(frozen=True)
class BuildEvent:
    """Structured build event for JSONL logging."""

    timestamp: str
    event_type: str
    build_id: str
    payload: dict[str, object] = field(
        default_factory=dict,
    )

    def to_jsonl(self) -> str:
        """Serialize to single-line JSON for JSONL format."""
        return json.dumps(asdict(self), separators=(",", ":"))


@dataclass(frozen=True)
class WorkflowContext:
    """Immutable context flowing through pipeline steps.

    Frozen dataclass: attribute reassignment is blocked. Container fields
    (dicts, lists) are shallow-frozen, callers MUST NOT mutate them in
    place. Steps return a NEW context via with_updates(). Never mutate.
    """

    inputs: dict[str, object] = field(default_factory=dict)
    outputs: dict[str, object] = field(default_factory=dict)
    feedback: list[str] = field(default_factory=list)

    def with_updates(
        self,
        inputs: dict[str, object] | None = None,
        outputs: dict[str, object] | None = None,
        feedback: list[str] | None = None,
    ) -> WorkflowContext:
        """Return new context with specified fields replaced."""
        return replace(
            self,
            inputs=inputs if inputs is not None else self.inputs,
            outputs=outputs if outputs is not None else self.outputs,
            feedback=feedback if feedback is not None else self.feedback,
        )

    def add_feedback(self, entry: str) -> WorkflowContext:
        """Return new context with feedback entry appended."""
        return replace(self, feedback=[*self.feedback, entry])

    def promote_outputs_to_inputs(self) -> WorkflowContext:
        """Merge outputs into inputs and clear outputs for the next step.

        Raises:
            ValueError: If any output key already exists in inputs.
        """
        collisions = set(self.inputs.keys()) & set(self.outputs.keys())
        if collisions:
            msg = f"Collision detected: outputs {collisions} already exist in inputs"
            raise ValueError(msg)

        return replace(
            self,
            inputs={**self.inputs, **self.outputs},
            outputs={},
        )

    def merge_outputs(self, new_outputs: dict[str, object]) -> WorkflowContext:
        """Return new context with new_outputs merged into existing outputs."""
        return replace(self, outputs={**self.outputs, **new_outputs})


class GlassineConfig(BaseModel):
    """Runtime settings for image storage and rootfs staging."""

    model_config = ConfigDict(frozen=True)

    base_dir: Path = DEFAULT_BASE_DIR
    rootfs_size: str = DEFAULT_ROOTFS_SIZE
    download_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=1.0, ge=0.0)
    kernel_artifact: str = KERNEL_ARTIFACT
    rootfs_artifact: str = ROOTFS_ARTIFACT

    @property
    def images_dir(self) -> Path:
        return self.base_dir / "images"

    @property
    def builds_dir(self) -> Path:
        return self.base_dir / "builds"

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def artifacts(self) -> tuple[str, str]:
        """Artifact file names every base image must provide."""
        return (self.kernel_artifact, self.rootfs_artifact)
