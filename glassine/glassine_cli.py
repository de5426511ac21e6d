"""Glassine command line: parse, check and build definition documents.

Usage:
  glassine parse Glassfile
  glassine check Glassfile
  glassine build Glassfile --base-dir /var/glassine --size 4G
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError
from returns.io import IOFailure
from returns.result import Failure
from returns.unsafe import unsafe_perform_io

from glassine.modules import io_ops
from glassine.modules.definition import parse_definition
from glassine.modules.engine import run_workflow
from glassine.modules.steps.plan_build import BuildPlan
from glassine.modules.types import (
    DEFAULT_BASE_DIR,
    DEFAULT_ROOTFS_SIZE,
    GlassineConfig,
    WorkflowContext,
)
from glassine.workflows import WorkflowName, build_workflow, load_workflow

_definition_argument = click.argument(
    "definition",
    type=click.Path(dir_okay=False, path_type=Path),
)


def _fail(message: str) -> NoReturn:
    io_ops.write_stderr(f"{message}\n")
    sys.exit(1)


def _echo_plan(plan: BuildPlan) -> None:
    click.echo(f"build {plan.build_id} from {plan.origin}")
    for action in plan.actions:
        click.echo(
            f"  {action.kind.symbolic_name:<8}"
            f" {action.value}  (in {action.workdir})",
        )
    if plan.entrypoint is not None:
        click.echo(f"  entrypoint: {plan.entrypoint}")


@click.group()
def main() -> None:
    """Build guest VM images from definition documents."""


@main.command("parse")
@_definition_argument
def parse_command(definition: Path) -> None:
    """Print the commands a definition declares."""
    read_result = io_ops.read_file(definition)
    if isinstance(read_result, IOFailure):
        err = unsafe_perform_io(read_result.failure())
        _fail(err.message)
    text = unsafe_perform_io(read_result.unwrap())

    parse_result = parse_definition(text)
    if isinstance(parse_result, Failure):
        _fail(f"{definition}: {parse_result.failure().message}")

    for command in parse_result.unwrap():
        click.echo(f"{command}  [{command.fingerprint}]")


@main.command("check")
@_definition_argument
def check_command(definition: Path) -> None:
    """Validate a definition and print its build plan."""
    workflow = load_workflow(WorkflowName.CHECK)
    assert workflow is not None  # noqa: S101
    result = run_workflow(
        workflow,
        WorkflowContext(inputs={"definition_path": definition}),
    )
    if isinstance(result, IOFailure):
        err = unsafe_perform_io(result.failure())
        _fail(f"{definition}: {err.message}")

    ctx = unsafe_perform_io(result.unwrap())
    plan = ctx.outputs.get("build_plan")
    if isinstance(plan, BuildPlan):
        _echo_plan(plan)


@main.command("build")
@_definition_argument
@click.option(
    "--base-dir",
    default=str(DEFAULT_BASE_DIR),
    type=click.Path(file_okay=False, path_type=Path),
    help=f"Image and build storage root (default: {DEFAULT_BASE_DIR})",
)
@click.option(
    "--size",
    default=DEFAULT_ROOTFS_SIZE,
    help=f"Size of the staged rootfs (default: {DEFAULT_ROOTFS_SIZE})",
)
@click.option(
    "--attempts",
    default=3,
    type=int,
    help="Download attempts per artifact (default: 3)",
)
def build_command(
    definition: Path,
    base_dir: Path,
    size: str,
    attempts: int,
) -> None:
    """Fetch the origin image and stage a rootfs for a definition."""
    try:
        config = GlassineConfig(
            base_dir=base_dir,
            rootfs_size=size,
            download_attempts=attempts,
        )
    except ValidationError as exc:
        _fail(f"Invalid options: {exc}")

    result = run_workflow(
        build_workflow(config),
        WorkflowContext(
            inputs={"definition_path": definition, "config": config},
        ),
    )
    if isinstance(result, IOFailure):
        err = unsafe_perform_io(result.failure())
        _fail(f"Build failed: {err.message}")

    ctx = unsafe_perform_io(result.unwrap())
    plan = ctx.inputs.get("build_plan")
    if isinstance(plan, BuildPlan):
        _echo_plan(plan)
    click.echo(f"rootfs: {ctx.inputs.get('rootfs_path')}")


if __name__ == "__main__":
    main()
