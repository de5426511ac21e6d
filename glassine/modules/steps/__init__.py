"""Step implementations for the Glassine build pipeline."""
from glassine.modules.steps.fetch_image import fetch_image
from glassine.modules.steps.log_build_event import (
    log_build_event,
    log_build_event_safe,
)
from glassine.modules.steps.parse_definition_step import (
    parse_definition_step,
)
from glassine.modules.steps.plan_build import plan_build_step
from glassine.modules.steps.read_definition import read_definition
from glassine.modules.steps.stage_rootfs import stage_rootfs

__all__ = [
    "fetch_image",
    "log_build_event",
    "log_build_event_safe",
    "parse_definition_step",
    "plan_build_step",
    "read_definition",
    "stage_rootfs",
]
