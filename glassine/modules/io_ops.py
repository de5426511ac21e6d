"""I/O boundary module -- ALL external I/O goes through here.

This is the single mock point for the entire test suite.
Steps never import I/O directly; they call io_ops functions.
"""
from __future__ import annotations

import os
import re
import shutil
import sys
import time
from typing import TYPE_CHECKING
from urllib.error import URLError
from urllib.request import urlretrieve

from returns.io import IOFailure, IOResult, IOSuccess

from glassine.modules.errors import PipelineError

if TYPE_CHECKING:
    from pathlib import Path


def read_file(path: Path) -> IOResult[str, PipelineError]:
    """Read file contents. Returns IOResult, never raises."""
    try:
        return IOSuccess(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return IOFailure(
            PipelineError(
                step_name="io_ops.read_file",
                error_type="FileNotFoundError",
                message=f"File not found: {path}",
                context={"path": str(path)},
            ),
        )
    except PermissionError:
        return IOFailure(
            PipelineError(
                step_name="io_ops.read_file",
                error_type="PermissionError",
                message=f"Permission denied: {path}",
                context={"path": str(path)},
            ),
        )
    except (OSError, UnicodeDecodeError) as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.read_file",
                error_type=type(exc).__name__,
                message=f"Error reading {path}: {exc}",
                context={"path": str(path)},
            ),
        )


def path_exists(path: Path) -> bool:
    """Check if a filesystem path exists. Mockable seam."""
    return path.exists()


def make_directory(path: Path) -> IOResult[None, PipelineError]:
    """Create directory and parents. Returns IOResult, never raises."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.make_directory",
                error_type=type(exc).__name__,
                message=f"Failed to create directory {path}: {exc}",
                context={"path": str(path)},
            ),
        )
    return IOSuccess(None)


def download_file(
    url: str,
    dest: Path,
) -> IOResult[None, PipelineError]:
    """Download url to dest.

    Writes to a ``.part`` sibling first and renames on completion,
    so an interrupted download never looks like a cached artifact.
    A URL without a scheme fails here as a DownloadError.
    """
    partial = dest.with_name(dest.name + ".part")
    try:
        urlretrieve(url, partial)  # noqa: S310
        os.replace(partial, dest)
    except (URLError, OSError, ValueError) as exc:
        partial.unlink(missing_ok=True)
        return IOFailure(
            PipelineError(
                step_name="io_ops.download_file",
                error_type="DownloadError",
                message=f"Failed to download {url}: {exc}",
                context={"url": url, "dest": str(dest)},
            ),
        )
    return IOSuccess(None)


def copy_file(
    source: Path,
    dest: Path,
) -> IOResult[None, PipelineError]:
    """Copy a file's contents. Returns IOResult, never raises."""
    try:
        shutil.copyfile(source, dest)
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.copy_file",
                error_type=type(exc).__name__,
                message=f"Failed to copy {source} to {dest}: {exc}",
                context={"source": str(source), "dest": str(dest)},
            ),
        )
    return IOSuccess(None)


def truncate_file(
    path: Path,
    size: int,
) -> IOResult[None, PipelineError]:
    """Grow or shrink a file to exactly size bytes."""
    try:
        os.truncate(path, size)
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.truncate_file",
                error_type=type(exc).__name__,
                message=f"Failed to resize {path}: {exc}",
                context={"path": str(path), "size": size},
            ),
        )
    return IOSuccess(None)


def _sanitize_build_id(build_id: str) -> str:
    """Sanitize build_id for safe use as a filename.

    Replaces any characters that are not alphanumeric,
    hyphens, or underscores with underscores.
    """
    name = re.sub(r"[^A-Za-z0-9_\-]", "_", build_id)
    if not name:
        name = "invalid-build"
    return name


def write_build_log(
    logs_dir: Path,
    build_id: str,
    event_json: str,
) -> IOResult[None, PipelineError]:
    """Append event JSONL to the build-specific log file.

    Creates logs_dir if it does not exist. Appends
    event_json + newline to <build_id>.jsonl.
    """
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = logs_dir / f"{_sanitize_build_id(build_id)}.jsonl"
        with log_file.open("a", encoding="utf-8") as f:
            f.write(event_json + "\n")
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.write_build_log",
                error_type="BuildLogWriteError",
                message=(
                    f"Failed to write build log"
                    f" for build {build_id}:"
                    f" {exc}"
                ),
                context={"build_id": build_id},
            ),
        )
    return IOSuccess(None)


def write_stderr(
    message: str,
) -> IOResult[None, PipelineError]:
    """Write message to stderr. Returns IOResult, never raises."""
    try:
        sys.stderr.write(message)
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.write_stderr",
                error_type="StderrWriteError",
                message=(
                    f"Failed to write to stderr: {exc}"
                ),
                context={
                    "original_message": message,
                },
            ),
        )
    return IOSuccess(None)


def sleep_seconds(
    seconds: float,
) -> IOResult[None, PipelineError]:
    """Sleep for specified seconds. Returns IOResult, never raises."""
    try:
        time.sleep(seconds)
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.sleep_seconds",
                error_type=type(exc).__name__,
                message=f"Sleep interrupted: {exc}",
                context={"seconds": seconds},
            ),
        )
    else:
        return IOSuccess(None)
