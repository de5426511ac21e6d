"""Tests for the glassine command line.

Uses Click's CliRunner for in-process testing.
"""
from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import click.testing
from returns.io import IOFailure, IOSuccess

from glassine.glassine_cli import main
from glassine.modules.errors import PipelineError

if TYPE_CHECKING:
    from pathlib import Path

    from glassine.modules.steps.plan_build import BuildPlan


def _write(tmp_path: Path, text: str) -> Path:
    definition = tmp_path / "Glassfile"
    definition.write_text(text, encoding="utf-8")
    return definition


class TestParseCLI:
    """Tests for `glassine parse`."""

    def test_parse_prints_commands_with_fingerprints(
        self,
        tmp_path: Path,
    ) -> None:
        definition = _write(tmp_path, "FROM a\nRUN x\n")
        result = click.testing.CliRunner().invoke(
            main, ["parse", str(definition)],
        )
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "ORIGIN a  [97]",
            "RUN x  [1081]",
        ]

    def test_parse_error_exits_1(self, tmp_path: Path) -> None:
        definition = _write(tmp_path, "FROM a\nRUN\n")
        result = click.testing.CliRunner().invoke(
            main, ["parse", str(definition)],
        )
        assert result.exit_code == 1
        assert "Expected value after <RUN> at line 2" in result.output

    def test_parse_missing_file(self, tmp_path: Path) -> None:
        result = click.testing.CliRunner().invoke(
            main, ["parse", str(tmp_path / "absent")],
        )
        assert result.exit_code == 1
        assert "File not found" in result.output


class TestCheckCLI:
    """Tests for `glassine check`."""

    def test_check_prints_plan(
        self,
        tmp_path: Path,
        sample_definition: str,
        sample_plan: BuildPlan,
    ) -> None:
        definition = _write(tmp_path, sample_definition)
        result = click.testing.CliRunner().invoke(
            main, ["check", str(definition)],
        )
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == (
            f"build {sample_plan.build_id}"
            " from https://images.example.com/ubuntu/focal"
        )
        assert "  WORKDIR  /srv  (in /srv)" in lines
        assert lines[-1] == "  entrypoint: /usr/sbin/nginx"

    def test_check_invalid_definition(self, tmp_path: Path) -> None:
        definition = _write(tmp_path, "RUN x\n")
        result = click.testing.CliRunner().invoke(
            main, ["check", str(definition)],
        )
        assert result.exit_code == 1
        assert "Input definition has no origin." in result.output


class TestBuildCLI:
    """Tests for `glassine build`."""

    def test_build_success(
        self,
        tmp_path: Path,
        sample_definition: str,
    ) -> None:
        definition = _write(tmp_path, sample_definition)
        base_dir = tmp_path / "store"

        def fake_download(url: str, dest: Path) -> IOSuccess[None]:
            dest.write_bytes(url.encode())
            return IOSuccess(None)

        with patch(
            "glassine.modules.io_ops.download_file",
            side_effect=fake_download,
        ) as mock_download:
            result = click.testing.CliRunner().invoke(
                main,
                [
                    "build",
                    str(definition),
                    "--base-dir",
                    str(base_dir),
                    "--size",
                    "8K",
                ],
            )
        assert result.exit_code == 0, result.output
        assert mock_download.call_count == 2
        assert "rootfs: " in result.output
        rootfs = next((base_dir / "builds").glob("*/rootfs.ext4"))
        assert rootfs.stat().st_size == 8192

    def test_build_invalid_attempts(self, tmp_path: Path) -> None:
        definition = _write(tmp_path, "FROM https://example.org/base\n")
        result = click.testing.CliRunner().invoke(
            main,
            ["build", str(definition), "--attempts", "0"],
        )
        assert result.exit_code == 1
        assert "Invalid options" in result.output

    def test_build_failure_exits_1(
        self,
        tmp_path: Path,
        sample_definition: str,
    ) -> None:
        definition = _write(tmp_path, sample_definition)
        with patch(
            "glassine.modules.io_ops.download_file",
        ) as mock_download:
            mock_download.return_value = IOFailure(
                PipelineError(
                    step_name="io_ops.download_file",
                    error_type="DownloadError",
                    message="Failed to download: offline",
                ),
            )
            result = click.testing.CliRunner().invoke(
                main,
                [
                    "build",
                    str(definition),
                    "--base-dir",
                    str(tmp_path / "store"),
                    "--attempts",
                    "1",
                ],
            )
        assert result.exit_code == 1
        assert "Build failed: Failed to download: offline" in result.output

    def test_build_schemeless_origin_exits_1(self, tmp_path: Path) -> None:
        """A FROM without a URL scheme is reported, not raised."""
        definition = _write(tmp_path, "FROM a\n")
        base_dir = tmp_path / "store"
        result = click.testing.CliRunner().invoke(
            main,
            [
                "build",
                str(definition),
                "--base-dir",
                str(base_dir),
                "--attempts",
                "1",
            ],
        )
        assert result.exit_code == 1
        assert result.exception is None or isinstance(
            result.exception, SystemExit,
        )
        assert "Build failed: Failed to download a/vmlinux" in result.output
        assert list((base_dir / "logs").glob("*.jsonl"))
