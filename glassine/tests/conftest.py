"""Shared test fixtures for the Glassine test suite."""
from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from glassine.modules.definition import parse
from glassine.modules.steps.plan_build import BuildPlan, create_build_plan
from glassine.modules.types import GlassineConfig, WorkflowContext

if TYPE_CHECKING:
    from pathlib import Path

    from glassine.modules.definition import Command

SAMPLE_DEFINITION = """\
# Sample web server image
FROM https://images.example.com/ubuntu/focal

WORKDIR /srv
RUN apt-get update && \\
    apt-get install -y nginx   # web server
COPY site /srv/site
CMD /usr/sbin/nginx
"""


@pytest.fixture
def sample_definition() -> str:
    """Return a valid definition document using every command type."""
    return SAMPLE_DEFINITION


@pytest.fixture
def sample_commands() -> list[Command]:
    """Return the parsed commands of the sample definition."""
    return parse(SAMPLE_DEFINITION)


@pytest.fixture
def sample_plan(sample_commands: list[Command]) -> BuildPlan:
    """Return the build plan of the sample definition."""
    return create_build_plan(sample_commands).unwrap()


@pytest.fixture
def glassine_config(tmp_path: Path) -> GlassineConfig:
    """Return a configuration rooted in a temporary directory."""
    return GlassineConfig(
        base_dir=tmp_path / "glassine",
        rootfs_size="64M",
        retry_delay_seconds=0.0,
    )


@pytest.fixture
def sample_workflow_context() -> WorkflowContext:
    """Return a WorkflowContext with sample test data."""
    return WorkflowContext(
        inputs={"definition_path": "/tmp/Glassfile"},
        outputs={},
        feedback=[],
    )

