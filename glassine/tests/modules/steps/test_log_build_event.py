"""Tests for build event logging steps."""
from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from returns.io import IOFailure, IOSuccess
from returns.unsafe import unsafe_perform_io

from glassine.modules.errors import PipelineError
from glassine.modules.steps.log_build_event import (
    log_build_event,
    log_build_event_safe,
)
from glassine.modules.types import GlassineConfig, WorkflowContext

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from glassine.modules.steps.plan_build import BuildPlan


def _read_events(config: GlassineConfig, build_id: str) -> list[dict]:
    log_file = config.logs_dir / f"{build_id}.jsonl"
    return [
        json.loads(line)
        for line in log_file.read_text(encoding="utf-8").splitlines()
    ]


def test_log_success_event(
    sample_plan: BuildPlan,
    glassine_config: GlassineConfig,
) -> None:
    """A successful build is logged under the plan's build id."""
    ctx = WorkflowContext(
        inputs={
            "build_plan": sample_plan,
            "config": glassine_config,
            "definition_path": "/tmp/Glassfile",
            "downloaded": ["vmlinux"],
        },
    )
    result = log_build_event(ctx)
    assert isinstance(result, IOSuccess)
    assert unsafe_perform_io(result.unwrap()).outputs == {
        "build_event_logged": True,
    }

    events = _read_events(glassine_config, sample_plan.build_id)
    assert len(events) == 1
    event = events[0]
    assert event["event_type"] == "build_succeeded"
    assert event["build_id"] == sample_plan.build_id
    assert event["payload"]["definition_path"] == "/tmp/Glassfile"
    assert event["payload"]["downloaded"] == ["vmlinux"]
    assert event["payload"]["plan"]["origin"] == sample_plan.origin


def test_log_failure_event(
    sample_plan: BuildPlan,
    glassine_config: GlassineConfig,
) -> None:
    """A pipeline failure turns the event into build_failed."""
    failure = PipelineError(
        step_name="fetch_image",
        error_type="DownloadError",
        message="404",
    ).to_dict()
    ctx = WorkflowContext(
        inputs={
            "build_plan": sample_plan,
            "config": glassine_config,
            "pipeline_failure": failure,
        },
        feedback=["Retry 1/3 for step 'fetch_image': 404"],
    )
    log_build_event(ctx)
    event = _read_events(glassine_config, sample_plan.build_id)[0]
    assert event["event_type"] == "build_failed"
    assert event["payload"]["failure"]["error_type"] == "DownloadError"
    assert event["payload"]["feedback"] == [
        "Retry 1/3 for step 'fetch_image': 404",
    ]


def test_log_explicit_event_type_appends(
    sample_plan: BuildPlan,
    glassine_config: GlassineConfig,
) -> None:
    """Events for the same build append to one file."""
    for event_type in ("build_started", "build_succeeded"):
        log_build_event(
            WorkflowContext(
                inputs={
                    "build_plan": sample_plan,
                    "config": glassine_config,
                    "event_type": event_type,
                },
            ),
        )
    events = _read_events(glassine_config, sample_plan.build_id)
    assert [e["event_type"] for e in events] == [
        "build_started",
        "build_succeeded",
    ]


def test_log_without_plan_uses_unknown_id(
    glassine_config: GlassineConfig,
) -> None:
    """Failures before planning still get a log file."""
    ctx = WorkflowContext(
        inputs={
            "config": glassine_config,
            "pipeline_failure": {"message": "parse error"},
        },
    )
    result = log_build_event(ctx)
    assert isinstance(result, IOSuccess)
    files = list(glassine_config.logs_dir.glob("unknown-*.jsonl"))
    assert len(files) == 1


def test_log_write_failure(
    sample_plan: BuildPlan,
    glassine_config: GlassineConfig,
    mocker: MockerFixture,
) -> None:
    """Write errors are reported under the step's name."""
    mocker.patch(
        "glassine.modules.io_ops.write_build_log",
        return_value=IOFailure(
            PipelineError(
                step_name="io_ops.write_build_log",
                error_type="BuildLogWriteError",
                message="disk full",
            ),
        ),
    )
    result = log_build_event(
        WorkflowContext(
            inputs={"build_plan": sample_plan, "config": glassine_config},
        ),
    )
    assert isinstance(result, IOFailure)
    error = unsafe_perform_io(result.failure())
    assert error.step_name == "log_build_event"
    assert error.error_type == "BuildLogWriteError"


def test_log_safe_never_fails(
    sample_plan: BuildPlan,
    glassine_config: GlassineConfig,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """The safe variant reports write errors and succeeds."""
    mocker.patch(
        "glassine.modules.io_ops.write_build_log",
        return_value=IOFailure(
            PipelineError(
                step_name="io_ops.write_build_log",
                error_type="BuildLogWriteError",
                message="disk full",
            ),
        ),
    )
    result = log_build_event_safe(
        WorkflowContext(
            inputs={"build_plan": sample_plan, "config": glassine_config},
        ),
    )
    assert isinstance(result, IOSuccess)
    outputs = unsafe_perform_io(result.unwrap()).outputs
    assert outputs["build_event_logged"] is False
    assert "disk full" in str(outputs["build_event_error"])
    assert "log_build_event_safe:" in capsys.readouterr().err


def test_log_safe_passes_through_success(
    sample_plan: BuildPlan,
    glassine_config: GlassineConfig,
) -> None:
    result = log_build_event_safe(
        WorkflowContext(
            inputs={"build_plan": sample_plan, "config": glassine_config},
        ),
    )
    outputs = unsafe_perform_io(result.unwrap()).outputs
    assert outputs == {"build_event_logged": True}
