"""Failure record carried along the build pipeline's result railway.

Parser exceptions, io_ops failures and step input problems all end up
as a PipelineError inside an IOFailure. Steps re-attribute an error
they pass on with at_step() instead of rebuilding it field by field.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace

_MAX_CONTEXT_CHARS = 500


def _json_safe(value: object) -> object:
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    return str(value)


@dataclass(frozen=True)
class PipelineError:
    """Why a pipeline stage failed.

    step_name is the step or io_ops function that failed and error_type
    the failure class, such as ``UnknownCommandError`` or
    ``DownloadError``. line is the definition line of a parse failure.
    """

    step_name: str
    error_type: str
    message: str
    context: dict[str, object] = field(default_factory=dict)
    line: int | None = None

    def at_step(self, step_name: str) -> PipelineError:
        """Return the same failure attributed to step_name."""
        return replace(self, step_name=step_name)

    def with_context(self, **extra: object) -> PipelineError:
        """Return a copy with extra merged into context."""
        return replace(self, context={**self.context, **extra})

    def to_dict(self) -> dict[str, object]:
        """JSON-safe form, as embedded in build_failed events."""
        return {
            "step_name": self.step_name,
            "error_type": self.error_type,
            "message": self.message,
            "line": self.line,
            "context": _json_safe(self.context),
        }

    def __str__(self) -> str:
        text = f"{self.step_name}: {self.error_type}: {self.message}"
        if self.context:
            details = str(self.context)
            if len(details) > _MAX_CONTEXT_CHARS:
                details = details[: _MAX_CONTEXT_CHARS - 3] + "..."
            text += f" [{details}]"
        return text
