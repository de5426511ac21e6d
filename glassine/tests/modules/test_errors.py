"""Tests for PipelineError."""
import dataclasses
import json

import pytest

from glassine.modules.errors import PipelineError


def _download_error(**context: object) -> PipelineError:
    return PipelineError(
        step_name="io_ops.download_file",
        error_type="DownloadError",
        message="Failed to download https://example.com/vmlinux",
        context=context,
    )


def test_pipeline_error_defaults() -> None:
    """Context defaults to empty and line to None."""
    error = PipelineError(step_name="s", error_type="E", message="m")
    assert error.context == {}
    assert error.line is None


def test_pipeline_error_is_frozen() -> None:
    error = _download_error()
    with pytest.raises(dataclasses.FrozenInstanceError):
        error.message = "other"  # type: ignore[misc]


def test_at_step_reattributes_failure() -> None:
    """at_step keeps everything but the step name."""
    error = PipelineError(
        step_name="parse_definition",
        error_type="UnknownCommandError",
        message="Invalid command <ADD> on line 3",
        line=3,
    )
    moved = error.at_step("parse_definition_step")
    assert moved.step_name == "parse_definition_step"
    assert moved.error_type == "UnknownCommandError"
    assert moved.line == 3
    assert error.step_name == "parse_definition"


def test_with_context_merges() -> None:
    """with_context adds keys without touching the original."""
    error = _download_error(url="https://example.com/vmlinux")
    enriched = error.with_context(attempt=2)
    assert enriched.context == {
        "url": "https://example.com/vmlinux",
        "attempt": 2,
    }
    assert error.context == {"url": "https://example.com/vmlinux"}


def test_to_dict_includes_line() -> None:
    """to_dict returns every field as plain data."""
    error = PipelineError(
        step_name="parse_definition",
        error_type="MissingArgumentError",
        message="Expected value after <RUN> at line 2",
        line=2,
    )
    assert error.to_dict() == {
        "step_name": "parse_definition",
        "error_type": "MissingArgumentError",
        "message": "Expected value after <RUN> at line 2",
        "line": 2,
        "context": {},
    }


def test_to_dict_stringifies_unknown_values() -> None:
    """Non-JSON context values are converted to strings."""
    error = _download_error(path=object, items=(1, 2), nested={3: None})
    result = error.to_dict()
    assert json.loads(json.dumps(result)) == result
    ctx = result["context"]
    assert isinstance(ctx, dict)
    assert ctx["items"] == [1, 2]
    assert ctx["nested"] == {"3": None}
    assert isinstance(ctx["path"], str)


def test_str_names_step_type_and_message() -> None:
    result = str(_download_error())
    assert result == (
        "io_ops.download_file: DownloadError:"
        " Failed to download https://example.com/vmlinux"
    )


def test_str_truncates_long_context() -> None:
    """Long context is cut off in the string form."""
    result = str(_download_error(blob="x" * 2000))
    assert result.endswith("...]")
    assert len(result) < 600
